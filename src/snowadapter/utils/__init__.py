"""
Utility helpers shared across snowadapter packages.
"""

from .logging import configure_logging, get_logger, resolve_slow_call_ms, time_call

__all__ = ["configure_logging", "get_logger", "resolve_slow_call_ms", "time_call"]
