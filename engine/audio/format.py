"""
Audio format descriptor.

Pure data container describing a PCM stream as reported by its container.
Read once before scanning; immutable for the rest of the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Encoding(str, Enum):
    """
    Sample encoding as reported by the container.

    Only PCM_SIGNED is analyzable; the rest exist so rejection
    messages can name what the file actually is.
    """

    PCM_SIGNED = "PCM_SIGNED"
    PCM_UNSIGNED = "PCM_UNSIGNED"
    PCM_FLOAT = "PCM_FLOAT"
    OTHER = "OTHER"


class ByteOrder(str, Enum):
    """Byte order of multi-byte samples."""

    LITTLE = "LITTLE"
    BIG = "BIG"


@dataclass(frozen=True)
class FormatDescriptor:
    """
    Format of a PCM stream.

    frame_size_bytes:
        Bytes per frame (one sample per channel) as supplied by the container.
        Authoritative: decoders slice on this value, it is never re-derived
        from channels x bits_per_sample.

    container:
        Container name (e.g. "WAV"). Informational only.
    """
    encoding: Encoding
    byte_order: ByteOrder
    sample_rate_hz: float
    channels: int
    bits_per_sample: int
    frame_size_bytes: int
    container: str = ""

    def describe(self) -> str:
        """
        One-line human summary, printed before a scan starts.

        e.g. "PCM_SIGNED 44100.0 Hz, 16 bit, stereo, 4 bytes/frame, little-endian"
        """
        if self.channels == 1:
            channel_text = "mono"
        elif self.channels == 2:
            channel_text = "stereo"
        else:
            channel_text = f"{self.channels} channels"

        parts = [
            f"{self.encoding.value} {float(self.sample_rate_hz)} Hz",
            f"{self.bits_per_sample} bit",
            channel_text,
            f"{self.frame_size_bytes} bytes/frame",
        ]
        # Byte order is meaningless for single-byte samples
        if self.bits_per_sample > 8:
            parts.append(
                "big-endian" if self.byte_order is ByteOrder.BIG else "little-endian"
            )
        return ", ".join(parts)
