"""Parsing of Go-style duration strings ("300ms", "1.5s", "1m30s")."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal

from ..errors import ConfigError

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT_RE = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)", re.ASCII)
_DURATION_RE = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+", re.ASCII)

# Go durations are int64 nanoseconds.
_MAX_NANOSECONDS = 2**63 - 1


def parse_duration(value: str, *, key: str) -> timedelta:
    """
    Parse ``value`` and return its absolute duration.

    The sign is accepted but ignored, so ``"-300ms"`` and ``"300ms"`` are equal.
    Sub-microsecond precision is truncated. Surrounding whitespace and
    durations beyond roughly 292 years are rejected.
    """

    if value in {"0", "+0", "-0"}:
        return timedelta(0)
    if not _DURATION_RE.fullmatch(value):
        raise ConfigError(f"Invalid duration value for '{key}': {value!r}", key=key)

    total_ns = Decimal(0)
    for number, unit in _COMPONENT_RE.findall(value.lstrip("+-")):
        total_ns += Decimal(number) * _UNIT_NANOSECONDS[unit]
    if total_ns > _MAX_NANOSECONDS:
        raise ConfigError(f"Invalid duration value for '{key}': {value!r} (out of range)", key=key)
    return timedelta(microseconds=int(total_ns) // 1_000)
