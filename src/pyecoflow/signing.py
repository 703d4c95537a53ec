"""Request signing for the EcoFlow open platform.

Every request carries four headers: ``accessKey``, ``nonce``, ``timestamp`` and
``sign``. The signature is an HMAC-SHA256 over a canonical string built from
the request's logical parameters:

1. Parameters are sorted by key (stable, so duplicate keys keep their order).
2. Keys and values are percent-encoded and joined as ``key=value&...``.
   Only ASCII letters, digits and ``* - . _`` stay literal, so ``~`` becomes
   ``%7E``, ``+`` becomes ``%2B`` and space becomes ``%20``.
3. ``accessKey=<key>&nonce=<nonce>&timestamp=<ms>`` is appended unsorted.
4. The UTF-8 string is signed with the UTF-8 secret key, hex encoded.

The server recomputes the same string, so the parameters signed here must be
exactly the parameters sent.
"""

from __future__ import annotations

import hashlib
import hmac
import random
import time
from typing import TYPE_CHECKING
from urllib.parse import quote, urlencode

from pyecoflow.const import NONCE_MAX, NONCE_MIN


if TYPE_CHECKING:
    from collections.abc import Iterable

    from pyecoflow.models import Credentials


__all__ = [
    "canonical_string",
    "current_timestamp",
    "generate_nonce",
    "sign",
    "signature_headers",
]


def generate_nonce() -> str:
    """Return a random 6-digit decimal nonce."""
    return str(random.randint(NONCE_MIN, NONCE_MAX))  # noqa: S311 - not a secret


def current_timestamp() -> int:
    """Return the current time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def _quote_component(
    value: str,
    safe: str = "",
    encoding: str | None = None,
    errors: str | None = None,
) -> str:
    # quote() never escapes "~" and always escapes "*"; the server does the opposite
    return quote(value, safe=safe + "*", encoding=encoding, errors=errors).replace("~", "%7E")


def canonical_string(
    params: Iterable[tuple[str, str]],
    access_key: str,
    timestamp: int,
    nonce: str,
) -> str:
    """Build the string the signature is computed over.

    Args:
        params: Logical request parameters as (key, value) pairs.
        access_key: Public access key.
        timestamp: Request timestamp in epoch milliseconds.
        nonce: Request nonce.

    Returns:
        Canonical signable string.
    """
    ordered = sorted(params, key=lambda pair: pair[0])
    query = urlencode(ordered, quote_via=_quote_component)
    suffix = f"accessKey={access_key}&nonce={nonce}&timestamp={timestamp}"
    return f"{query}&{suffix}" if query else suffix


def sign(
    params: Iterable[tuple[str, str]],
    access_key: str,
    secret_key: str,
    timestamp: int,
    nonce: str,
) -> str:
    """Compute the request signature.

    Args:
        params: Logical request parameters as (key, value) pairs.
        access_key: Public access key.
        secret_key: Secret key used as the HMAC key.
        timestamp: Request timestamp in epoch milliseconds.
        nonce: Request nonce.

    Returns:
        Lowercase hex HMAC-SHA256 signature.
    """
    message = canonical_string(params, access_key, timestamp, nonce)
    return hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def signature_headers(
    params: Iterable[tuple[str, str]],
    credentials: Credentials,
    *,
    timestamp: int | None = None,
    nonce: str | None = None,
) -> dict[str, str]:
    """Sign parameters and return the four authentication headers.

    A fresh nonce and timestamp are generated unless supplied.

    Args:
        params: Logical request parameters as (key, value) pairs.
        credentials: Access and secret key.
        timestamp: Optional fixed timestamp in epoch milliseconds.
        nonce: Optional fixed nonce.

    Returns:
        Headers ``accessKey``, ``nonce``, ``timestamp`` and ``sign``.
    """
    if timestamp is None:
        timestamp = current_timestamp()
    if nonce is None:
        nonce = generate_nonce()

    signature = sign(params, credentials.access_key, credentials.secret_key, timestamp, nonce)

    return {
        "accessKey": credentials.access_key,
        "nonce": nonce,
        "timestamp": str(timestamp),
        "sign": signature,
    }
