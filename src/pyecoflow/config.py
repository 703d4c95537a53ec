"""Configuration for pyecoflow clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dotenv import find_dotenv, load_dotenv

from pyecoflow.const import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ENV_ACCESS_KEY,
    ENV_BASE_URL,
    ENV_SECRET_KEY,
    ENV_SERIAL,
    ENV_TIMEOUT,
)


if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class EcoFlowConfig:
    """Explicit client configuration.

    Attributes:
        access_key: Open-platform access key.
        secret_key: Open-platform secret key.
        default_serial: Serial number used when an operation names no device.
        base_url: Base URL for the API.
        timeout: Transport timeout in seconds.
    """

    access_key: str
    secret_key: str = field(repr=False)
    default_serial: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> EcoFlowConfig:
        """Load configuration from environment variables.

        Values from ``env_file`` (or a ``.env`` found from the working
        directory) are loaded first without overriding variables already set.

        Args:
            env_file: Optional path to a .env file.

        Returns:
            EcoFlowConfig built from ECOFLOW_* variables.

        Raises:
            ValueError: If the access key or secret key is missing, or the
                timeout is not a number.
        """
        load_dotenv(env_file if env_file is not None else find_dotenv(usecwd=True))

        access_key = os.getenv(ENV_ACCESS_KEY)
        secret_key = os.getenv(ENV_SECRET_KEY)

        if not access_key or not secret_key:
            msg = f"Missing required environment variables {ENV_ACCESS_KEY} and {ENV_SECRET_KEY}"
            raise ValueError(msg)

        raw_timeout = os.getenv(ENV_TIMEOUT)
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as err:
            msg = f"{ENV_TIMEOUT} must be a number, got {raw_timeout!r}"
            raise ValueError(msg) from err

        return cls(
            access_key=access_key,
            secret_key=secret_key,
            default_serial=os.getenv(ENV_SERIAL) or None,
            base_url=os.getenv(ENV_BASE_URL) or DEFAULT_BASE_URL,
            timeout=timeout,
        )
