"""
PCM sample decoding.

Converts raw interleaved little-endian two's-complement PCM into signed
integers, one per channel, for sample widths of 1 to 4 bytes.

Every width goes through the same pad-then-shift step:
the sample's bytes become the HIGH-order bytes of a 32-bit little-endian
word (zero bytes below them), the word is read as signed int32, and an
arithmetic right shift by (4 - width) * 8 bits restores the magnitude while
keeping the sign. No per-width branches.

Pure functions only (no IO, no state).
"""

from __future__ import annotations

import struct

import numpy as np
from numpy.typing import NDArray

from spec import DECODE_WORD_BYTES, MAX_SAMPLE_WIDTH_BYTES


# -------------------------
# Exceptions
# -------------------------

class PcmDecodeError(Exception):
    """Base class for PCM decoding errors."""


class InvalidFrameLayout(PcmDecodeError):
    """
    Raised when a frame's byte length is inconsistent with its channel count
    or implies a sample wider than 4 bytes.

    This is a caller contract breach, not a user-facing error: format
    validation must keep such frames from ever reaching the decoder.
    """


# -------------------------
# Low-level helpers
# -------------------------

def _read_i32_le(buf: bytes, offset: int = 0) -> int:
    return struct.unpack_from("<i", buf, offset)[0]


def sample_width_bytes(frame_size_bytes: int, channels: int) -> int:
    """
    Return the per-channel sample width for a frame layout.

    Raises:
        InvalidFrameLayout if the layout cannot be decoded.
    """
    if channels < 1:
        raise InvalidFrameLayout(f"channels must be >= 1 (got {channels})")
    if frame_size_bytes <= 0:
        raise InvalidFrameLayout(f"frame length must be > 0 (got {frame_size_bytes})")
    if frame_size_bytes < channels or frame_size_bytes % channels != 0:
        raise InvalidFrameLayout(
            f"frame length {frame_size_bytes} is not a multiple of {channels} channels"
        )

    width = frame_size_bytes // channels
    if width > MAX_SAMPLE_WIDTH_BYTES:
        raise InvalidFrameLayout(
            f"sample width {width} bytes exceeds {MAX_SAMPLE_WIDTH_BYTES}"
        )
    return width


# -------------------------
# Per-frame decoding
# -------------------------

def decode_frame(frame_bytes: bytes, channels: int) -> tuple[int, ...]:
    """
    Decode one interleaved frame into one signed integer per channel.

    Args:
        frame_bytes:
            Exactly one frame. The width of each sample is
            len(frame_bytes) // channels.
        channels:
            Number of interleaved channels.

    Returns:
        Tuple of samples in channel order.

    Raises:
        InvalidFrameLayout on a malformed frame.
    """
    frame_bytes = bytes(frame_bytes)
    width = sample_width_bytes(len(frame_bytes), channels)

    pad = b"\x00" * (DECODE_WORD_BYTES - width)
    shift = (DECODE_WORD_BYTES - width) * 8

    return tuple(
        _read_i32_le(pad + frame_bytes[offset : offset + width]) >> shift
        for offset in range(0, len(frame_bytes), width)
    )


# -------------------------
# Block decoding
# -------------------------

def decode_frames(
    pcm_bytes: bytes,
    channels: int,
    frame_size_bytes: int,
) -> NDArray[np.int32]:
    """
    Decode a run of whole frames at once.

    Same algorithm as decode_frame(), vectorized with numpy.

    Returns:
        int32 array of shape (frames, channels).
        Drops any incomplete trailing frame.

    Raises:
        InvalidFrameLayout if frame_size_bytes / channels is not decodable.
    """
    width = sample_width_bytes(frame_size_bytes, channels)
    whole_frames = len(pcm_bytes) // frame_size_bytes
    if whole_frames == 0:
        return np.zeros((0, channels), dtype=np.int32)

    samples = whole_frames * channels
    raw = np.frombuffer(
        pcm_bytes, dtype=np.uint8, count=whole_frames * frame_size_bytes
    ).reshape(samples, width)

    # Left-align each sample inside a little-endian 32-bit word
    words = np.zeros((samples, DECODE_WORD_BYTES), dtype=np.uint8)
    words[:, DECODE_WORD_BYTES - width :] = raw

    decoded = words.view("<i4").reshape(whole_frames, channels)
    decoded = decoded >> ((DECODE_WORD_BYTES - width) * 8)
    return decoded.astype(np.int32, copy=False)
