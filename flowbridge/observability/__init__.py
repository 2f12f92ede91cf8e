"""
Observability module - Logging, Metrics, and Tracing.
"""

import threading

from flowbridge.config import Settings
from flowbridge.observability.logging import get_logger, log_context, setup_logging
from flowbridge.observability.metrics import metrics
from flowbridge.observability.tracing import setup_tracing

_initialized = False
_init_lock = threading.Lock()


def init_observability(config: Settings | None = None) -> None:
    """
    Configure logging and tracing once per process.

    Entry points call this before doing any work; later calls are no-ops.
    """
    global _initialized

    if _initialized:
        return
    with _init_lock:
        if _initialized:
            return
        setup_logging(config)
        setup_tracing(config)
        _initialized = True


__all__ = [
    "get_logger",
    "init_observability",
    "log_context",
    "setup_logging",
    "metrics",
    "setup_tracing",
]
