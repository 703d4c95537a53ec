"""Integration tests for pyecoflow library.

These tests use real API credentials from .env file and make actual API calls.
They are marked with @pytest.mark.integration and skipped by default.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables required in .env:
    ECOFLOW_ACCESS_KEY: Open-platform access key
    ECOFLOW_SECRET_KEY: Open-platform secret key
    ECOFLOW_SERIAL: Serial number of a test device (optional)
    ECOFLOW_BASE_URL: API base URL (optional, defaults to production)
"""
