"""
JSONL event logger.

- Write one JSON object per line
- Output to stderr (stdout carries the dropout report)
- No buffering, no batching
- Disabled until configured; no side effects beyond logging
"""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Callable


# ------------------------------------------------------------------
# Explicit output sink (patchable in tests)
# ------------------------------------------------------------------

def _stderr_print(line: str) -> None:
    sys.stderr.write(line + "\n")
    sys.stderr.flush()


def _discard(line: str) -> None:  # pylint: disable=unused-argument
    return None


_print: Callable[[str], None] = _discard


def set_enabled(enabled: bool) -> None:
    """
    Route events to stderr (enabled) or drop them (disabled).
    """
    global _print  # pylint: disable=global-statement
    _print = _stderr_print if enabled else _discard


def log_event(event: Mapping[str, Any]) -> None:
    """
    Write a single JSONL event.

    The caller is responsible for:
    - Supplying a fully-formed event dict
    - Including ts_ms, event_type, path, etc.

    This function:
    - Serializes to JSON
    - Writes exactly one line
    - Flushes immediately (no buffering)
    - Never raises
    """
    try:
        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        # Last-resort fallback: logging must never crash an analysis
        fallback: dict[str, Any] = {
            "ts_ms": event.get("ts_ms"),
            "event_type": "LOGGER_SERIALIZATION_ERROR",
            "error": str(e),
            "original_event_repr": repr(event),
        }
        line = json.dumps(fallback, ensure_ascii=False, separators=(",", ":"))

    _print(line)
