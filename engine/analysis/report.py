"""
Dropout report coalescing.

Turns the chronological dropout stream into printable lines, enforcing a
one-second debounce measured from the last EMITTED line. Dropouts that fall
inside the window are dropped outright: they are not merged into the
previous line, counted, or allowed to extend the window.
"""

from __future__ import annotations

from typing import Iterable, Optional

from analysis.dropouts import Dropout
from spec import (
    NO_DROPOUTS_MESSAGE,
    REPORT_DEBOUNCE_S,
    REPORT_INITIAL_LAST_TIME_S,
    sample_position_to_seconds,
)


def format_dropout_line(dropout: Dropout, time_s: float) -> str:
    return (
        f"Dropout at {time_s:.3f}s (sample {dropout.sample_position}) "
        f"on channel {dropout.channel}: "
        f"{dropout.consecutive_count} identical samples"
    )


class ReportCoalescer:
    """
    Streaming debouncer. Feed dropouts in detection order.
    """

    def __init__(self, sample_rate_hz: float) -> None:
        if sample_rate_hz <= 0:
            raise ValueError("sample_rate_hz must be > 0")

        self._sample_rate_hz = sample_rate_hz
        self._last_reported_s = REPORT_INITIAL_LAST_TIME_S
        self.emitted = 0
        self.suppressed = 0

    def offer(self, dropout: Dropout) -> Optional[str]:
        """
        Return the report line for `dropout`, or None if it falls inside
        the debounce window of the last emitted line.
        """
        time_s = sample_position_to_seconds(dropout.sample_position, self._sample_rate_hz)

        if time_s - self._last_reported_s > REPORT_DEBOUNCE_S:
            self._last_reported_s = time_s
            self.emitted += 1
            return format_dropout_line(dropout, time_s)

        self.suppressed += 1
        return None


def summarize(dropouts: Iterable[Dropout], sample_rate_hz: float) -> list[str]:
    """
    Reduce a chronological dropout sequence to report lines.

    Returns [NO_DROPOUTS_MESSAGE] when there are no dropouts at all.
    """
    coalescer = ReportCoalescer(sample_rate_hz)
    lines: list[str] = []
    for dropout in dropouts:
        line = coalescer.offer(dropout)
        if line is not None:
            lines.append(line)

    if coalescer.emitted == 0 and coalescer.suppressed == 0:
        return [NO_DROPOUTS_MESSAGE]
    return lines
