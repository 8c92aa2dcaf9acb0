"""Timing spans for knowledge-base lookups that touch many rows."""

import time
from contextlib import contextmanager

from nutriplan.logging import get_logger

logger = get_logger(__name__)

_TIMING_PREFIX = "[TIMING]"


def format_duration(ms: int) -> str:
    """12500 -> '12.5s', 750 -> '750ms'."""
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms}ms"


@contextmanager
def time_span(name: str, **extra: object):
    """Log elapsed wall time for the wrapped block, plus any extra key=value fields."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = int((time.perf_counter() - start) * 1000)
        fields = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.info(
            "%s %s elapsed_ms=%s (%s) %s",
            _TIMING_PREFIX,
            name,
            elapsed,
            format_duration(elapsed),
            fields,
        )
