"""
Process-wide Flow client.

The client is built once, on first use, and reused by every invocation
sharing the process. Building it validates the Flow configuration, so a
missing credential surfaces as ConfigurationError on the first call.
"""

import threading

from structlog import get_logger

from flowbridge.config import Settings, get_flow_config
from flowbridge.services.flow_client import FlowClient

logger = get_logger(__name__)

_client: FlowClient | None = None
_client_lock = threading.Lock()


def get_flow_client(config: Settings | None = None) -> FlowClient:
    """
    Get the shared Flow client, creating it on first use.

    Raises:
        ConfigurationError: If Flow credentials are missing
    """
    global _client

    if _client is None:
        with _client_lock:
            # Concurrent cold starts: only the first caller builds it
            if _client is None:
                _client = FlowClient(get_flow_config(config))
                logger.info("flow_client_created")
    return _client


def reset_flow_client() -> None:
    """Drop the shared client so the next call rebuilds it from settings."""
    global _client

    with _client_lock:
        _client = None
