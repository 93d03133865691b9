"""
Scan timing.

One measured block = one METRIC_TIMER event. Durations use the monotonic
clock; ts_ms is wall-clock for log correlation only.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from observability.logger import log_event


@contextmanager
def timed(name: str, *, path: str | None = None) -> Iterator[dict[str, Any]]:
    """
    Time the enclosed block and emit exactly one metric event, even if the
    block raises.

    Yields a details dict that is attached to the event, so results known
    only at the end (frame counts etc.) travel with the duration:

        with timed("dropout_scan", path=path) as details:
            details["frames"] = scan()
    """
    details: dict[str, Any] = {}
    start_ns = time.monotonic_ns()
    try:
        yield details
    finally:
        log_event({
            "ts_ms": int(time.time() * 1000),
            "event_type": "METRIC_TIMER",
            "metric": name,
            "value_ms": (time.monotonic_ns() - start_ns) // 1_000_000,
            "path": path,
            "details": details,
        })
