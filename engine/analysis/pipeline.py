"""
Single-file dropout analysis.

Wires the collaborators together:

    read_format -> validate (gate) -> WavFrameSource blocks
        -> decode_frames -> DropoutScanner -> ReportCoalescer

Rules:
- A rejected format is a result, not an exception: no frames are read.
- One forward pass; one block of raw bytes held at a time.
- Report lines are produced as dropouts are found (streaming coalescing),
  which is equivalent to summarizing the full list afterwards.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from analysis.dropouts import Dropout, DropoutScanner
from analysis.format_check import validate
from analysis.report import ReportCoalescer
from audio.format import FormatDescriptor
from audio.pcm import decode_frames
from audio.wav_reader import WavFrameSource, read_format
from config import AppConfig
from observability.logger import log_event
from observability.metrics import timed
from spec import NO_DROPOUTS_MESSAGE


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of analyzing one file.

    problems:
        Format problems. Non-empty means the file was not scanned and
        dropouts/lines are empty.
    lines:
        Printable report lines (debounced), or [NO_DROPOUTS_MESSAGE].
    frames_scanned:
        Number of frames consumed by the scanner.
    """
    fmt: FormatDescriptor
    problems: list[str] = field(default_factory=list)
    dropouts: list[Dropout] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    frames_scanned: int = 0

    @property
    def accepted(self) -> bool:
        return not self.problems


def _now_ms() -> int:
    return int(time.time() * 1000)


def analyze_file(path: str, *, config: AppConfig) -> AnalysisResult:
    """
    Analyze one audio file for dropouts.

    Raises:
        UnsupportedAudioFile if the container cannot be parsed.
        OSError on read failures.
    """
    fmt = read_format(path)
    log_event({
        "ts_ms": _now_ms(),
        "event_type": "ANALYSIS_STARTED",
        "env": config.env,
        "path": path,
        "format": fmt.describe(),
    })

    problems = validate(fmt)
    if problems:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "FORMAT_REJECTED",
            "path": path,
            "problems": problems,
        })
        return AnalysisResult(fmt=fmt, problems=problems)

    dropouts: list[Dropout] = []
    lines: list[str] = []
    coalescer = ReportCoalescer(fmt.sample_rate_hz)

    try:
        with timed("dropout_scan", path=path) as details, WavFrameSource(path) as source:
            scanner = DropoutScanner(source.channels)
            frame_size = source.frame_size_bytes

            for block in source.blocks(block_frames=config.read_block_frames):
                samples = decode_frames(block, source.channels, frame_size)
                for dropout in scanner.feed_block(samples):
                    dropouts.append(dropout)
                    line = coalescer.offer(dropout)
                    if line is not None:
                        lines.append(line)

            details["frames"] = scanner.sample_index
            details["dropouts"] = len(dropouts)
    except Exception as exc:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "ANALYSIS_FAILED",
            "path": path,
            "exception": type(exc).__name__,
            "message": str(exc),
        })
        raise

    if not dropouts:
        lines = [NO_DROPOUTS_MESSAGE]

    log_event({
        "ts_ms": _now_ms(),
        "event_type": "ANALYSIS_COMPLETE",
        "path": path,
        "frames": scanner.sample_index,
        "dropouts": len(dropouts),
        "reported": coalescer.emitted,
        "suppressed": coalescer.suppressed,
    })

    return AnalysisResult(
        fmt=fmt,
        dropouts=dropouts,
        lines=lines,
        frames_scanned=scanner.sample_index,
    )
