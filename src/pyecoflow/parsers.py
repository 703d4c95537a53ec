"""Parsing utilities for EcoFlow API responses.

The EcoFlow API wraps every response in a JSON envelope, but in two shapes:

- Data envelope: ``{"code": "0", "message": "Success", "data": ...}`` for reads
- Simple envelope: ``{"code": "0", "message": "Success"}`` for commands and
  for most failures

A code of ``"0"`` means success. Reads are first matched against the data
envelope with the caller's payload parser; when the payload does not have the
expected shape, or the code is not ``"0"``, the body is re-read as a simple
envelope. Payload parsers report a shape mismatch by returning None rather
than raising, which keeps the fallback an ordinary branch.
"""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, TypeVar

from pyecoflow.const import SUCCESS_CODE
from pyecoflow.exceptions import RemoteError, ResponseDecodeError
from pyecoflow.models import DataEnvelope, Device, SimpleEnvelope


if TYPE_CHECKING:
    from collections.abc import Callable


__all__ = [
    "decode_response",
    "parse_data_envelope",
    "parse_device",
    "parse_device_list",
    "parse_quota_map",
    "parse_simple_envelope",
]

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def parse_device(data: Any) -> Device | None:
    """Parse one entry of the device list.

    Args:
        data: Raw entry in format:
              {"sn": str, "deviceName": str, "online": int | str, ...}

    Returns:
        Device instance, or None if the entry does not have that shape.
    """
    if not isinstance(data, dict):
        return None

    serial_number = data.get("sn")
    device_name = data.get("deviceName")
    online = data.get("online")

    if not isinstance(serial_number, str) or not isinstance(device_name, str):
        return None
    # quoted numbers such as "1" are accepted like plain integers
    if isinstance(online, str) and online.isascii() and online.isdigit():
        online = int(online)
    # bool is an int subclass but not a valid online indicator
    if not isinstance(online, int) or isinstance(online, bool):
        return None

    return Device(serial_number=serial_number, device_name=device_name, online=online)


def parse_device_list(data: Any) -> list[Device] | None:
    """Parse the payload of the device list endpoint.

    Args:
        data: Raw ``data`` value, expected to be a list of device entries.

    Returns:
        List of Device instances, or None if any entry has the wrong shape.
    """
    if not isinstance(data, list):
        return None

    devices: list[Device] = []
    for entry in data:
        device = parse_device(entry)
        if device is None:
            return None
        devices.append(device)

    return devices


def _quota_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def parse_quota_map(data: Any) -> dict[str, str] | None:
    """Parse the payload of the full-state endpoint.

    Telemetry values arrive as numbers, strings and nested objects. Strings are
    kept as-is; everything else is rendered as compact JSON text, so
    ``20.5`` becomes ``"20.5"`` and ``true`` becomes ``"true"``.

    Args:
        data: Raw ``data`` value, expected to be a JSON object.

    Returns:
        Mapping of quota name to value text, or None if data is not an object.
    """
    if not isinstance(data, dict):
        return None

    return {str(key): _quota_value(value) for key, value in data.items()}


def _body_text(raw_body: str | bytes | None) -> str:
    if raw_body is None:
        return ""
    if isinstance(raw_body, str):
        return raw_body

    try:
        return raw_body.decode("utf-8")
    except UnicodeDecodeError as err:
        msg = f"Response is not valid UTF-8: {err.reason}"
        raise ResponseDecodeError(msg, raw_body=raw_body.decode("utf-8", errors="replace")) from err


def _load_document(raw_body: str) -> dict[str, Any]:
    try:
        document = json.loads(raw_body)
    except json.JSONDecodeError as err:
        msg = f"Response is not valid JSON: {err.msg}"
        raise ResponseDecodeError(msg, raw_body=raw_body) from err

    if not isinstance(document, dict):
        msg = "Response is not a JSON object"
        raise ResponseDecodeError(msg, raw_body=raw_body)

    return document


def _envelope_code(document: dict[str, Any]) -> str | None:
    code = document.get("code")
    if isinstance(code, bool):
        return None
    if isinstance(code, str | int):
        return str(code)
    return None


def parse_simple_envelope(document: dict[str, Any]) -> SimpleEnvelope | None:
    """Read a decoded JSON object as a simple envelope.

    Args:
        document: Decoded response body.

    Returns:
        SimpleEnvelope, or None if there is no usable ``code``.
    """
    code = _envelope_code(document)
    if code is None:
        return None

    message = document.get("message")
    return SimpleEnvelope(code=code, message=message if isinstance(message, str) else "")


def parse_data_envelope(
    document: dict[str, Any],
    payload_parser: Callable[[Any], T | None],
) -> DataEnvelope[T] | None:
    """Read a decoded JSON object as a data envelope.

    A ``data`` key holding null is a valid envelope with no payload. A missing
    ``data`` key, or a payload the parser rejects, is a mismatch.

    Args:
        document: Decoded response body.
        payload_parser: Converts the raw ``data`` value, returning None when
            it does not have the expected shape.

    Returns:
        DataEnvelope, or None if the document does not match.
    """
    simple = parse_simple_envelope(document)
    if simple is None or "data" not in document:
        return None

    raw_data = document["data"]
    if raw_data is None:
        return DataEnvelope(code=simple.code, message=simple.message, data=None)

    data = payload_parser(raw_data)
    if data is None:
        return None

    return DataEnvelope(code=simple.code, message=simple.message, data=data)


def _require_success(document: dict[str, Any], status: int, raw_body: str) -> None:
    envelope = parse_simple_envelope(document)
    if envelope is None:
        msg = "Response matches neither envelope shape"
        raise ResponseDecodeError(msg, raw_body=raw_body)

    if envelope.code != SUCCESS_CODE:
        raise RemoteError(raw_body, status=status)


def decode_response(
    status: int,
    raw_body: str | bytes | None,
    *,
    was_command: bool,
    payload_parser: Callable[[Any], T | None] | None = None,
) -> T | None:
    """Decode a raw EcoFlow response.

    Decision procedure:
    1. Empty body with HTTP 200 is success with no payload.
    2. Non-200 status: simple envelope, code "0" is success with no payload.
    3. HTTP 200 command: simple envelope, same rule.
    4. HTTP 200 read: data envelope with ``payload_parser``; on a shape
       mismatch or non-"0" code, fall back to the simple envelope rule.

    Args:
        status: HTTP status code.
        raw_body: Response body, as bytes from the transport or as text.
        was_command: Whether the request carried a command body.
        payload_parser: Parser for the ``data`` value of reads.

    Returns:
        Parsed payload, or None for success without a payload.

    Raises:
        RemoteError: If the server returned a non-"0" code.
        ResponseDecodeError: If the body is not UTF-8 or matches neither
            envelope shape.
    """
    raw_body = _body_text(raw_body)

    if not raw_body.strip():
        if status == HTTPStatus.OK:
            return None
        msg = f"Empty response body with HTTP {status}"
        raise ResponseDecodeError(msg, raw_body=raw_body)

    document = _load_document(raw_body)

    if status != HTTPStatus.OK:
        # A non-200 status with code "0" is still success
        _require_success(document, status, raw_body)
        return None

    if was_command or payload_parser is None:
        _require_success(document, status, raw_body)
        return None

    envelope = parse_data_envelope(document, payload_parser)
    if envelope is not None and envelope.code == SUCCESS_CODE:
        return envelope.data

    if envelope is None:
        _LOGGER.debug("Payload did not match the expected shape, reading as simple envelope")

    _require_success(document, status, raw_body)
    return None
