"""
Streaming dropout detection.

A dropout is a run of more than DROPOUT_REPEAT_THRESHOLD consecutive
repeats of the same sample value on one channel. It is reported once, at
the sample index where the value finally changes (not where the run began).

Rules:
- The first frame only seeds the per-channel previous value (index 1).
- Channels are tracked independently.
- A run still open at end of stream is never reported.
- State is O(channels); no history beyond the previous frame is retained.

feed() and feed_block() share the same state, so a stream can be fed frame
by frame, block by block, or mixed, with identical results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np
from numpy.typing import NDArray

from spec import DROPOUT_REPEAT_THRESHOLD, FIRST_SAMPLE_INDEX


@dataclass(frozen=True)
class Dropout:
    """
    One detected dropout.

    sample_position:
        1-based index of the sample at which the run broke.
    channel:
        0-based channel index.
    consecutive_count:
        Number of repeats of the held value before the break.
    """
    sample_position: int
    channel: int
    consecutive_count: int


@dataclass
class RunState:
    """
    Per-channel run tracking. Owned exclusively by DropoutScanner.
    """
    previous_value: int = 0
    consecutive_count: int = 0


class DropoutScanner:
    """
    Single-pass run-length scanner over multi-channel sample frames.
    """

    def __init__(self, channels: int) -> None:
        if channels < 1:
            raise ValueError("channels must be >= 1")

        self._channels = channels
        self._runs: list[RunState] = [RunState() for _ in range(channels)]
        self._seeded = False
        self._sample_index = 0

    # -------------------------
    # Introspection
    # -------------------------

    @property
    def sample_index(self) -> int:
        """Index of the last frame consumed (0 before the first frame)."""
        return self._sample_index

    def runs(self) -> list[RunState]:
        """Copy of the current per-channel run state."""
        return [RunState(r.previous_value, r.consecutive_count) for r in self._runs]

    # -------------------------
    # Feeding
    # -------------------------

    def feed(self, frame: Sequence[int]) -> list[Dropout]:
        """
        Consume one frame (one sample per channel).

        Returns the dropouts whose runs broke at this frame, in channel order.
        """
        if len(frame) != self._channels:
            raise ValueError(
                f"frame has {len(frame)} samples, scanner expects {self._channels}"
            )

        if not self._seeded:
            for run, value in zip(self._runs, frame):
                run.previous_value = int(value)
            self._seeded = True
            self._sample_index = FIRST_SAMPLE_INDEX
            return []

        self._sample_index += 1
        found: list[Dropout] = []

        for channel, (run, value) in enumerate(zip(self._runs, frame)):
            value = int(value)
            if value == run.previous_value:
                run.consecutive_count += 1
            else:
                if run.consecutive_count > DROPOUT_REPEAT_THRESHOLD:
                    found.append(
                        Dropout(
                            sample_position=self._sample_index,
                            channel=channel,
                            consecutive_count=run.consecutive_count,
                        )
                    )
                run.consecutive_count = 0
            run.previous_value = value

        return found

    def feed_block(self, samples: NDArray[np.integer]) -> list[Dropout]:
        """
        Consume a block of frames shaped (frames, channels).

        Vectorized per channel: every value change is a run break, and the
        repeat count before a break is the distance to the previous break
        (or, for the first break, the carried count plus its offset).

        Returns the dropouts in chronological order, ties by channel.
        """
        block = np.asarray(samples)
        if block.ndim != 2 or block.shape[1] != self._channels:
            raise ValueError(
                f"block shape {block.shape} does not match {self._channels} channels"
            )
        if block.shape[0] == 0:
            return []

        if not self._seeded:
            self.feed(block[0].tolist())
            block = block[1:]
            if block.shape[0] == 0:
                return []

        n = block.shape[0]
        # Row i of the block is sample first_index + i
        first_index = self._sample_index + 1
        found: list[Dropout] = []

        for channel, run in enumerate(self._runs):
            column = block[:, channel].astype(np.int64)
            previous = np.empty_like(column)
            previous[0] = run.previous_value
            previous[1:] = column[:-1]

            breaks = np.flatnonzero(column != previous)
            if breaks.size == 0:
                run.consecutive_count += n
            else:
                lengths = np.empty(breaks.size, dtype=np.int64)
                lengths[0] = run.consecutive_count + breaks[0]
                lengths[1:] = np.diff(breaks) - 1

                hits = np.flatnonzero(lengths > DROPOUT_REPEAT_THRESHOLD)
                for k in hits.tolist():
                    found.append(
                        Dropout(
                            sample_position=first_index + int(breaks[k]),
                            channel=channel,
                            consecutive_count=int(lengths[k]),
                        )
                    )
                run.consecutive_count = n - 1 - int(breaks[-1])

            run.previous_value = int(column[-1])

        self._sample_index += n
        found.sort(key=lambda d: (d.sample_position, d.channel))
        return found


# =============================================================================
# Folds
# =============================================================================

def scan(frames: Iterable[Sequence[int]]) -> Iterator[Dropout]:
    """
    Lazily scan an iterable of frames.

    The channel count is taken from the first frame.
    The consumer may stop early; nothing beyond the previous frame is held.
    """
    scanner: DropoutScanner | None = None
    for frame in frames:
        if scanner is None:
            scanner = DropoutScanner(len(frame))
        yield from scanner.feed(frame)


def scan_blocks(
    blocks: Iterable[NDArray[np.integer]],
    channels: int,
) -> Iterator[Dropout]:
    """
    Lazily scan an iterable of (frames, channels) sample blocks.
    """
    scanner = DropoutScanner(channels)
    for block in blocks:
        yield from scanner.feed_block(block)
