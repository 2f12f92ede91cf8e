"""
Tests for the process-wide Flow client.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from flowbridge.config import ConfigurationError, Settings
from flowbridge.services.flow_client import FlowClient
from flowbridge.services.flow_registry import get_flow_client, reset_flow_client

pytestmark = pytest.mark.usefixtures("reset_shared_client")


def complete_settings() -> Settings:
    return Settings(
        _env_file=None,
        flow_api_key="key",
        flow_secret_key="secret",
        flow_base_url="https://sandbox.flow.test/api",
    )


class TestGetFlowClient:
    """Tests for get_flow_client."""

    def test_lazily_built_once(self):
        """The same instance is returned on every call."""
        first = get_flow_client(complete_settings())
        second = get_flow_client()

        assert isinstance(first, FlowClient)
        assert first is second
        assert first.config.api_key == "key"

    def test_missing_config_builds_nothing(self):
        """A configuration error leaves no half-built client behind."""
        incomplete = Settings(
            _env_file=None, flow_api_key="", flow_secret_key="s", flow_base_url=""
        )

        with pytest.raises(ConfigurationError):
            get_flow_client(incomplete)

        assert get_flow_client(complete_settings()).config.api_key == "key"

    def test_reset_rebuilds(self):
        """After reset a new instance is created."""
        first = get_flow_client(complete_settings())
        reset_flow_client()
        second = get_flow_client(complete_settings())

        assert first is not second

    def test_concurrent_cold_start(self):
        """Concurrent first calls all get the same instance."""
        settings = complete_settings()

        with ThreadPoolExecutor(max_workers=8) as pool:
            clients = list(pool.map(lambda _: get_flow_client(settings), range(32)))

        assert all(client is clients[0] for client in clients)
