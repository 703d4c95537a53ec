"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pyecoflow import EcoFlowClient, EcoFlowConfig


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


@pytest.fixture(scope="session")
def integration_config() -> EcoFlowConfig:
    """Load integration test configuration from the project .env file.

    Returns:
        EcoFlowConfig with real credentials.
    """
    env_path = Path(__file__).parents[2] / ".env"
    try:
        return EcoFlowConfig.from_env(env_path)
    except ValueError as err:
        pytest.skip(str(err))


@pytest.fixture
async def integration_client(integration_config: EcoFlowConfig) -> AsyncGenerator[EcoFlowClient]:
    """Create a client against the real API."""
    async with EcoFlowClient.from_config(integration_config) as client:
        yield client
