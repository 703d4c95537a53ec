"""Low-level API client for the EcoFlow open platform.

This module builds signed requests and executes them over HTTP.
``EcoFlowAPI.execute`` returns (status_code, headers, body_bytes) tuples and
leaves all envelope interpretation to ``pyecoflow.parsers``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aiohttp import ClientError, ClientSession, ClientTimeout

from pyecoflow.const import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, JSON_CONTENT_TYPE
from pyecoflow.models import SignedRequest
from pyecoflow.signing import signature_headers


if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from pyecoflow.models import Credentials

_LOGGER = logging.getLogger(__name__)


def build_request(
    path: str,
    params: Sequence[tuple[str, str]],
    body: str | None,
    credentials: Credentials,
    *,
    base_url: str = DEFAULT_BASE_URL,
    timestamp: int | None = None,
    nonce: str | None = None,
) -> SignedRequest:
    """Build a signed request.

    Requests with a body are commands and use PUT with a JSON content type;
    the parameters are signed but travel only inside the body. Requests
    without a body are reads and use GET, sending the parameters as the query
    string.

    Args:
        path: Endpoint path (e.g., "/iot-open/sign/device/list").
        params: Logical parameters to sign.
        body: Optional JSON body text.
        credentials: Access and secret key.
        base_url: Base URL for the API.
        timestamp: Optional fixed timestamp in epoch milliseconds.
        nonce: Optional fixed nonce.

    Returns:
        SignedRequest ready for execution.
    """
    params = tuple(params)
    headers = signature_headers(params, credentials, timestamp=timestamp, nonce=nonce)
    url = f"{base_url.rstrip('/')}{path}"

    if body is not None:
        headers["Content-Type"] = JSON_CONTENT_TYPE
        return SignedRequest(method="PUT", url=url, headers=headers, body=body)

    return SignedRequest(method="GET", url=url, headers=headers, query=params)


class EcoFlowAPI:
    """HTTP transport for signed EcoFlow requests.

    Example:
        ```python
        from aiohttp import ClientSession
        from pyecoflow.api import EcoFlowAPI, build_request
        from pyecoflow.models import Credentials

        credentials = Credentials(access_key="ak", secret_key="sk")

        async with ClientSession() as session:
            api = EcoFlowAPI(session=session)
            request = build_request("/iot-open/sign/device/list", [], None, credentials)
            status, headers, body = await api.execute(request)
        ```

    Attributes:
        base_url: Base URL for the API (default: https://api-a.ecoflow.com).
    """

    def __init__(
        self,
        *,
        session: ClientSession | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the API client.

        Args:
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            base_url: Base URL for the API. Defaults to the EcoFlow production API.
            timeout: Total timeout in seconds for one HTTP exchange.
        """
        self._session = session
        self._owns_session = session is None
        self.base_url = base_url.rstrip("/")
        self._timeout = ClientTimeout(total=timeout)

    async def __aenter__(self) -> EcoFlowAPI:
        """Enter the context manager.

        Creates a session if one wasn't provided.

        Returns:
            Self for use in async with statements.
        """
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Closes session if it was created by this client.

        Args:
            exc_type: Exception type if an exception occurred.
            exc_val: Exception value if an exception occurred.
            exc_tb: Exception traceback if an exception occurred.
        """
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def execute(self, request: SignedRequest) -> tuple[int, dict[str, str], bytes]:
        """Send a signed request.

        There is no retry: a failed or slow exchange surfaces to the caller.

        Args:
            request: Signed request from ``build_request``.

        Returns:
            Tuple of (status_code, response_headers, body_bytes). The body is
            returned undecoded.

        Raises:
            RuntimeError: If session is not initialized or is closed.
            TimeoutError: If request times out.
            ClientError: If connection fails.
        """
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)

        _LOGGER.debug("--> %s %s %s", request.method, request.url, dict(request.query))
        if request.body is not None:
            _LOGGER.debug("--> body %s", request.body)

        try:
            async with self._session.request(
                request.method,
                request.url,
                params=list(request.query) or None,
                data=request.body.encode("utf-8") if request.body is not None else None,
                headers=request.headers,
                timeout=self._timeout,
            ) as response:
                body = await response.read()
                _LOGGER.debug("<-- %d %s %r", response.status, request.url, body)
                return response.status, dict(response.headers), body

        except TimeoutError:
            _LOGGER.exception("Request to %s timed out", request.url)
            raise

        except ClientError:
            _LOGGER.exception("Connection error for %s", request.url)
            raise
