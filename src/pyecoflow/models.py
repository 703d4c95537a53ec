"""Data models for EcoFlow API requests and responses."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pyecoflow.const import (
    COMMAND_MODULE_TYPE,
    COMMAND_VERSION,
    OPERATE_TYPE_POWER_MODE,
    OPERATE_TYPE_SUB_MODE,
)


__all__ = [
    "CommandEnvelope",
    "CommandParams",
    "Credentials",
    "DataEnvelope",
    "Device",
    "PowerState",
    "PowerStateParams",
    "SignedRequest",
    "SimpleEnvelope",
    "SubMode",
    "SubModeParams",
]

T = TypeVar("T")


class PowerState(Enum):
    """Power state of a device, valued by its EcoFlow wire code."""

    ON = 1
    STANDBY = 2
    SHUT_DOWN = 3

    @property
    def code(self) -> int:
        """Integer code the EcoFlow API expects."""
        return self.value


class SubMode(Enum):
    """Operating sub-mode of a device, valued by its EcoFlow wire code."""

    MAX = 0
    ECO = 1
    SLEEP = 2
    MANUAL = 3

    @property
    def code(self) -> int:
        """Integer code the EcoFlow API expects."""
        return self.value


@dataclass(frozen=True)
class Credentials:
    """Open-platform API credentials.

    Attributes:
        access_key: Public access key sent with every request.
        secret_key: Secret key used as the HMAC key. Never sent.
    """

    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class Device:
    """Device registered to the account, from the device list endpoint.

    Attributes:
        serial_number: Device serial number (wire name ``sn``).
        device_name: User-facing device name.
        online: Online indicator, 1 when online and 0 otherwise.
    """

    serial_number: str
    device_name: str
    online: int

    @property
    def is_online(self) -> bool:
        """Check if device is online."""
        return self.online == 1


@dataclass(frozen=True)
class PowerStateParams:
    """Payload of a power mode command."""

    power_mode: int

    def to_param_list(self) -> list[tuple[str, str]]:
        """Return the signable parameter pairs of this payload."""
        return [("params.powerMode", str(self.power_mode))]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body representation of this payload."""
        return {"powerMode": self.power_mode}


@dataclass(frozen=True)
class SubModeParams:
    """Payload of a sub-mode command."""

    sub_mode: int

    def to_param_list(self) -> list[tuple[str, str]]:
        """Return the signable parameter pairs of this payload."""
        return [("params.subMode", str(self.sub_mode))]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body representation of this payload."""
        return {"subMode": self.sub_mode}


CommandParams = PowerStateParams | SubModeParams


def _current_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class CommandEnvelope:
    """Outbound command sent to the quota endpoint.

    The ``id`` is derived from the wall clock at creation. It is an opaque
    per-call tag; two commands created in the same millisecond share it.

    Attributes:
        serial_number: Target device serial number.
        operate_type: Operation tag, e.g. "powerMode" or "subMode".
        params: Command-specific payload.
        id: Command identifier in epoch milliseconds.
        version: Protocol version string.
        module_type: Module type the command addresses.
    """

    serial_number: str
    operate_type: str
    params: CommandParams
    id: int = field(default_factory=_current_millis)
    version: str = COMMAND_VERSION
    module_type: int = COMMAND_MODULE_TYPE

    @classmethod
    def power_mode(cls, serial_number: str, power_state: PowerState) -> CommandEnvelope:
        """Build a power mode command for a device."""
        return cls(
            serial_number=serial_number,
            operate_type=OPERATE_TYPE_POWER_MODE,
            params=PowerStateParams(power_mode=power_state.code),
        )

    @classmethod
    def sub_mode(cls, serial_number: str, sub_mode: SubMode) -> CommandEnvelope:
        """Build a sub-mode command for a device."""
        return cls(
            serial_number=serial_number,
            operate_type=OPERATE_TYPE_SUB_MODE,
            params=SubModeParams(sub_mode=sub_mode.code),
        )


@dataclass(frozen=True)
class SimpleEnvelope:
    """Response envelope without a payload.

    Attributes:
        code: Result code, "0" on success.
        message: Server message.
    """

    code: str
    message: str


@dataclass(frozen=True)
class DataEnvelope(Generic[T]):
    """Response envelope carrying an optional payload.

    Attributes:
        code: Result code, "0" on success.
        message: Server message.
        data: Decoded payload, None when the server sent null.
    """

    code: str
    message: str
    data: T | None = None


@dataclass(frozen=True)
class SignedRequest:
    """Fully authenticated request ready for the transport.

    Attributes:
        method: HTTP method, GET for reads and PUT for commands.
        url: Absolute request URL without query string.
        headers: Signature headers, plus Content-Type for commands.
        query: Query parameters sent on the URL.
        body: JSON body for commands, None for reads.
    """

    method: str
    url: str
    headers: dict[str, str]
    query: tuple[tuple[str, str], ...] = ()
    body: str | None = None

    @property
    def is_command(self) -> bool:
        """Check if this request carries a command body."""
        return self.body is not None

    @property
    def sign(self) -> str:
        """Signature header value."""
        return self.headers["sign"]
