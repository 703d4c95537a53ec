"""High-level client for EcoFlow devices.

This module composes request signing, the HTTP transport and response
decoding into the four device operations plus a signing self-test.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pyecoflow.api import EcoFlowAPI, build_request
from pyecoflow.const import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DEVICE_LIST_PATH,
    DEVICE_QUOTA_ALL_PATH,
    DEVICE_QUOTA_PATH,
    SELF_TEST_ACCESS_KEY,
    SELF_TEST_NONCE,
    SELF_TEST_PARAMS,
    SELF_TEST_SECRET_KEY,
    SELF_TEST_TIMESTAMP,
)
from pyecoflow.models import CommandEnvelope, Credentials, Device, PowerState, SubMode
from pyecoflow.parsers import decode_response, parse_device_list, parse_quota_map
from pyecoflow.serializers import encode_command, serialize_command


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from aiohttp import ClientSession

    from pyecoflow.config import EcoFlowConfig

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class EcoFlowClient:
    """Client for EcoFlow devices on the open platform.

    Each operation is one signed request/response exchange. Nothing is
    cached, retried or queued, and failures surface to the caller.

    Example:
        Basic usage with automatic session management:

        ```python
        from pyecoflow import EcoFlowClient, PowerState

        async with EcoFlowClient(
            access_key="ak", secret_key="sk", default_serial="HW52ZDH4SF123456"
        ) as client:
            devices = await client.list_devices()
            state = await client.get_full_state()
            await client.change_power_state(PowerState.ON)
        ```

        Configuration from the environment:

        ```python
        from pyecoflow import EcoFlowClient, EcoFlowConfig

        async with EcoFlowClient.from_config(EcoFlowConfig.from_env()) as client:
            devices = await client.list_devices()
        ```

    Attributes:
        api: Low-level EcoFlowAPI instance for HTTP communication.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        default_serial: str | None = None,
        session: ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the EcoFlow client.

        Args:
            access_key: Open-platform access key.
            secret_key: Open-platform secret key.
            base_url: Base URL for the API. Defaults to the EcoFlow production API.
            default_serial: Serial number used when an operation names no device.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            timeout: Transport timeout in seconds.
        """
        self._credentials = Credentials(access_key=access_key, secret_key=secret_key)
        self._default_serial = default_serial
        self._api = EcoFlowAPI(session=session, base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: EcoFlowConfig, *, session: ClientSession | None = None) -> EcoFlowClient:
        """Create a client from an EcoFlowConfig.

        Args:
            config: Credentials, default serial and transport settings.
            session: Optional aiohttp ClientSession.

        Returns:
            New EcoFlowClient.
        """
        return cls(
            config.access_key,
            config.secret_key,
            config.base_url,
            default_serial=config.default_serial,
            session=session,
            timeout=config.timeout,
        )

    @property
    def api(self) -> EcoFlowAPI:
        """Get the underlying API client.

        Returns:
            EcoFlowAPI instance.
        """
        return self._api

    async def __aenter__(self) -> EcoFlowClient:
        """Enter the context manager.

        Returns:
            Self for use in async with statements.
        """
        await self._api.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager and close the API client."""
        await self._api.__aexit__(exc_type, exc_val, exc_tb)

    async def list_devices(self) -> list[Device]:
        """Get all devices registered to the account.

        Returns:
            List of Device instances. Empty if the server sent no payload.

        Raises:
            RemoteError: If the server rejects the request.
            ResponseDecodeError: If the response cannot be parsed.
        """
        devices = await self._call(DEVICE_LIST_PATH, payload_parser=parse_device_list)
        _LOGGER.debug("Found %d device(s)", len(devices or []))
        return devices or []

    async def change_power_state(self, power_state: PowerState, serial_number: str | None = None) -> None:
        """Change the power state of a device.

        Args:
            power_state: Target power state.
            serial_number: Device serial number. Defaults to the configured serial.

        Raises:
            ValueError: If no serial number is given or configured.
            RemoteError: If the server rejects the command.
            ResponseDecodeError: If the response cannot be parsed.
        """
        serial_number = self._resolve_serial(serial_number)
        await self._send_command(CommandEnvelope.power_mode(serial_number, power_state))
        _LOGGER.info("Set power state of %s to %s", serial_number, power_state.name)

    async def change_sub_mode(self, sub_mode: SubMode, serial_number: str | None = None) -> None:
        """Change the sub-mode of a device.

        Args:
            sub_mode: Target sub-mode.
            serial_number: Device serial number. Defaults to the configured serial.

        Raises:
            ValueError: If no serial number is given or configured.
            RemoteError: If the server rejects the command.
            ResponseDecodeError: If the response cannot be parsed.
        """
        serial_number = self._resolve_serial(serial_number)
        await self._send_command(CommandEnvelope.sub_mode(serial_number, sub_mode))
        _LOGGER.info("Set sub-mode of %s to %s", serial_number, sub_mode.name)

    async def get_full_state(self, serial_number: str | None = None) -> dict[str, str] | None:
        """Get all telemetry values (quotas) reported by a device.

        Args:
            serial_number: Device serial number. Defaults to the configured serial.

        Returns:
            Mapping of quota name to value text, or None if the device
            reported nothing.

        Raises:
            ValueError: If no serial number is given or configured.
            RemoteError: If the server rejects the request.
            ResponseDecodeError: If the response cannot be parsed.
        """
        serial_number = self._resolve_serial(serial_number)
        return await self._call(
            DEVICE_QUOTA_ALL_PATH,
            params=[("sn", serial_number)],
            payload_parser=parse_quota_map,
        )

    def test_call(self) -> str:
        """Sign the documented example request and return its signature.

        Uses fixed credentials, nonce and timestamp, so the result can be
        compared against the known signature for those inputs. No request
        is sent.

        Returns:
            The ``sign`` header value.
        """
        request = build_request(
            "/",
            SELF_TEST_PARAMS,
            None,
            Credentials(access_key=SELF_TEST_ACCESS_KEY, secret_key=SELF_TEST_SECRET_KEY),
            base_url=self._api.base_url,
            timestamp=SELF_TEST_TIMESTAMP,
            nonce=SELF_TEST_NONCE,
        )
        return request.sign

    def _resolve_serial(self, serial_number: str | None) -> str:
        if serial_number is not None:
            return serial_number
        if self._default_serial is not None:
            return self._default_serial

        msg = "No serial number given and no default serial configured"
        raise ValueError(msg)

    async def _send_command(self, envelope: CommandEnvelope) -> None:
        await self._call(
            DEVICE_QUOTA_PATH,
            params=encode_command(envelope),
            body=serialize_command(envelope),
        )

    async def _call(
        self,
        path: str,
        *,
        params: Sequence[tuple[str, str]] = (),
        body: str | None = None,
        payload_parser: Callable[[Any], T | None] | None = None,
    ) -> T | None:
        request = build_request(path, params, body, self._credentials, base_url=self._api.base_url)
        status, _, raw_body = await self._api.execute(request)

        return decode_response(
            status,
            raw_body,
            was_command=request.is_command,
            payload_parser=payload_parser,
        )
