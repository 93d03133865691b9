"""
Container access for PCM audio files.

Two thin collaborators around the decoding core:
- read_format(): container metadata via libsndfile (soundfile), mapped onto
  a FormatDescriptor. Works for any container libsndfile understands, so
  unsupported files can still be described before they are rejected.
- WavFrameSource: raw interleaved PCM bytes via the stdlib wave module,
  streamed a block of whole frames at a time. Only used once the format
  has been accepted.

Non-responsibilities:
- No sample decoding (audio.pcm)
- No format policy (analysis.format_check)
"""

from __future__ import annotations

import sys
import wave
from types import TracebackType
from typing import Iterator, Optional

import soundfile as sf

from audio.format import ByteOrder, Encoding, FormatDescriptor


class UnsupportedAudioFile(Exception):
    """
    Raised when a file's container cannot be parsed.

    Wraps the underlying library error; the message is suitable for
    printing to the user.
    """


# libsndfile subtype -> (encoding, bits per sample)
_SUBTYPE_LAYOUT: dict[str, tuple[Encoding, int]] = {
    "PCM_S8": (Encoding.PCM_SIGNED, 8),
    "PCM_U8": (Encoding.PCM_UNSIGNED, 8),
    "PCM_16": (Encoding.PCM_SIGNED, 16),
    "PCM_24": (Encoding.PCM_SIGNED, 24),
    "PCM_32": (Encoding.PCM_SIGNED, 32),
    "FLOAT": (Encoding.PCM_FLOAT, 32),
    "DOUBLE": (Encoding.PCM_FLOAT, 64),
    "ULAW": (Encoding.OTHER, 8),
    "ALAW": (Encoding.OTHER, 8),
}

# Containers that store samples as uncompressed PCM. Anything else (FLAC,
# OGG, MPEG, ...) carries a codec, whatever subtype libsndfile decodes it to.
_UNCOMPRESSED_CONTAINERS = frozenset({"WAV", "WAVEX", "AIFF", "AU"})

# Containers whose native ("FILE") byte order is big-endian
_BIG_ENDIAN_CONTAINERS = frozenset({"AIFF", "AU"})


def _byte_order(container: str, endian: str) -> ByteOrder:
    if endian == "BIG":
        return ByteOrder.BIG
    if endian == "LITTLE":
        return ByteOrder.LITTLE
    if endian == "CPU":
        return ByteOrder.BIG if sys.byteorder == "big" else ByteOrder.LITTLE
    return ByteOrder.BIG if container in _BIG_ENDIAN_CONTAINERS else ByteOrder.LITTLE


def read_format(path: str) -> FormatDescriptor:
    """
    Read the format of an audio file without touching its sample data.

    Raises:
        UnsupportedAudioFile if libsndfile cannot open the file.
    """
    try:
        info = sf.info(path)
    except sf.LibsndfileError as exc:
        raise UnsupportedAudioFile(str(exc)) from exc

    encoding, bits = _SUBTYPE_LAYOUT.get(info.subtype, (Encoding.OTHER, 0))
    if info.format not in _UNCOMPRESSED_CONTAINERS:
        encoding = Encoding.OTHER

    return FormatDescriptor(
        encoding=encoding,
        byte_order=_byte_order(info.format, info.endian),
        sample_rate_hz=float(info.samplerate),
        channels=info.channels,
        bits_per_sample=bits,
        frame_size_bytes=info.channels * ((bits + 7) // 8),
        container=info.format,
    )


class WavFrameSource:
    """
    Streaming reader of raw PCM frames from a WAV file.

    Usage:

        with WavFrameSource(path) as source:
            for block in source.blocks(block_frames=4096):
                ...

    frame_size_bytes is the container's own frame length and is what
    decoders must slice on.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._reader: Optional[wave.Wave_read] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> WavFrameSource:
        """
        Open the underlying file.

        Raises:
            UnsupportedAudioFile if the WAV header cannot be parsed.
        """
        try:
            self._reader = wave.open(self._path, "rb")
        except (wave.Error, EOFError) as exc:
            raise UnsupportedAudioFile(f"{self._path}: {exc}") from exc
        return self

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def __enter__(self) -> WavFrameSource:
        return self.open()

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def _require_open(self) -> wave.Wave_read:
        if self._reader is None:
            raise RuntimeError("WavFrameSource is not open")
        return self._reader

    @property
    def channels(self) -> int:
        return self._require_open().getnchannels()

    @property
    def frame_size_bytes(self) -> int:
        reader = self._require_open()
        return reader.getnchannels() * reader.getsampwidth()

    @property
    def frame_count(self) -> int:
        return self._require_open().getnframes()

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    def blocks(self, *, block_frames: int) -> Iterator[bytes]:
        """
        Yield raw PCM in blocks of up to block_frames whole frames.

        Stops at end of data. A truncated trailing frame (short file)
        is passed through; decoders drop it.
        """
        if block_frames <= 0:
            raise ValueError("block_frames must be > 0")

        reader = self._require_open()
        while True:
            block = reader.readframes(block_frames)
            if not block:
                return
            yield block
