"""Python client library for the EcoFlow IoT open platform.

This package provides an async client for listing EcoFlow devices, reading
their telemetry and changing their power state and sub-mode.

The library is organized into layers:
1. **Signing** (pyecoflow.signing): Canonical query string and HMAC-SHA256 signature
2. **API Layer** (pyecoflow.api): Signed request construction and HTTP transport
3. **Parsing** (pyecoflow.parsers): Decoding of the two response envelope shapes
4. **Client Layer** (pyecoflow.client): Device operations

Example:
    Basic usage:

    ```python
    from pyecoflow import EcoFlowClient, PowerState, SubMode

    async with EcoFlowClient(access_key="ak", secret_key="sk") as client:
        devices = await client.list_devices()

        for device in devices:
            print(f"{device.device_name}: online={device.is_online}")

        serial = devices[0].serial_number
        await client.change_power_state(PowerState.ON, serial)
        await client.change_sub_mode(SubMode.ECO, serial)

        state = await client.get_full_state(serial)
    ```
"""

from __future__ import annotations

from pyecoflow.api import EcoFlowAPI, build_request
from pyecoflow.client import EcoFlowClient
from pyecoflow.config import EcoFlowConfig
from pyecoflow.exceptions import EcoFlowError, RemoteError, ResponseDecodeError
from pyecoflow.models import (
    CommandEnvelope,
    Credentials,
    DataEnvelope,
    Device,
    PowerState,
    PowerStateParams,
    SignedRequest,
    SimpleEnvelope,
    SubMode,
    SubModeParams,
)
from pyecoflow.parsers import decode_response, parse_device_list, parse_quota_map
from pyecoflow.serializers import encode_command, serialize_command
from pyecoflow.signing import sign, signature_headers


__version__ = "0.1.0"

__all__ = [
    "CommandEnvelope",
    "Credentials",
    "DataEnvelope",
    "Device",
    "EcoFlowAPI",
    "EcoFlowClient",
    "EcoFlowConfig",
    "EcoFlowError",
    "PowerState",
    "PowerStateParams",
    "RemoteError",
    "ResponseDecodeError",
    "SignedRequest",
    "SimpleEnvelope",
    "SubMode",
    "SubModeParams",
    "__version__",
    "build_request",
    "decode_response",
    "encode_command",
    "parse_device_list",
    "parse_quota_map",
    "serialize_command",
    "sign",
    "signature_headers",
]
