"""Serialization of outbound commands.

This module provides stateless functions converting a command envelope into
the two forms the quota endpoint needs: the flat parameter list that gets
signed, and the JSON body that gets sent.

The key names, including the dotted ``params.<field>`` convention, are part of
the signing contract and must match what the server derives from the body.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from pyecoflow.models import CommandEnvelope


__all__ = [
    "command_to_dict",
    "encode_command",
    "serialize_command",
]


def encode_command(envelope: CommandEnvelope) -> list[tuple[str, str]]:
    """Flatten a command envelope into signable parameter pairs.

    Order is ``id``, ``version``, ``sn``, ``moduleType``, ``operateType``,
    followed by the payload's own pairs. The signer re-sorts, so the order is
    only cosmetic.

    Args:
        envelope: Command to encode.

    Returns:
        List of (key, value) string pairs.

    Example:
        >>> from pyecoflow.models import CommandEnvelope, PowerState
        >>> envelope = CommandEnvelope.power_mode("SN1", PowerState.ON)
        >>> encode_command(envelope)[-1]
        ('params.powerMode', '1')
    """
    return [
        ("id", str(envelope.id)),
        ("version", envelope.version),
        ("sn", envelope.serial_number),
        ("moduleType", str(envelope.module_type)),
        ("operateType", envelope.operate_type),
        *envelope.params.to_param_list(),
    ]


def command_to_dict(envelope: CommandEnvelope) -> dict[str, Any]:
    """Return the JSON-ready representation of a command envelope."""
    return {
        "id": envelope.id,
        "version": envelope.version,
        "sn": envelope.serial_number,
        "moduleType": envelope.module_type,
        "operateType": envelope.operate_type,
        "params": envelope.params.to_dict(),
    }


def serialize_command(envelope: CommandEnvelope) -> str:
    """Serialize a command envelope into its JSON request body.

    Args:
        envelope: Command to serialize.

    Returns:
        Compact JSON text.
    """
    return json.dumps(command_to_dict(envelope), separators=(",", ":"))
