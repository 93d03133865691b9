# pylint: disable=missing-module-docstring,missing-function-docstring

import wave
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from analysis.format_check import validate
from audio.format import ByteOrder, Encoding
from audio.pcm import decode_frames
from audio.wav_reader import UnsupportedAudioFile, WavFrameSource, read_format


def write_pcm_wav(path: Path, rows: list[tuple[int, ...]], *, rate: int, width: int) -> Path:
    channels = len(rows[0])
    frames = b"".join(v.to_bytes(width, "little", signed=True) for row in rows for v in row)
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(width)
        wf.setframerate(rate)
        wf.writeframes(frames)
    return path


# ---------------------------------------------------------------------
# read_format
# ---------------------------------------------------------------------

def test_reads_16bit_stereo_wav(tmp_path: Path):
    path = write_pcm_wav(tmp_path / "a.wav", [(0, 1)] * 10, rate=48_000, width=2)

    fmt = read_format(str(path))

    assert fmt.encoding is Encoding.PCM_SIGNED
    assert fmt.byte_order is ByteOrder.LITTLE
    assert fmt.sample_rate_hz == 48_000.0
    assert fmt.channels == 2
    assert fmt.bits_per_sample == 16
    assert fmt.frame_size_bytes == 4
    assert fmt.container == "WAV"


def test_reads_24bit_mono_wav(tmp_path: Path):
    path = write_pcm_wav(tmp_path / "b.wav", [(5,)] * 10, rate=44_100, width=3)

    fmt = read_format(str(path))

    assert fmt.bits_per_sample == 24
    assert fmt.channels == 1
    assert fmt.frame_size_bytes == 3


def test_float_wav_is_described_as_float(tmp_path: Path):
    path = tmp_path / "f.wav"
    sf.write(str(path), np.zeros(100, dtype=np.float32), 44_100, subtype="FLOAT")

    fmt = read_format(str(path))

    assert fmt.encoding is Encoding.PCM_FLOAT
    assert fmt.bits_per_sample == 32


def test_aiff_is_big_endian(tmp_path: Path):
    path = tmp_path / "a.aiff"
    sf.write(str(path), np.zeros(100, dtype=np.int16), 44_100, format="AIFF", subtype="PCM_16")

    fmt = read_format(str(path))

    assert fmt.byte_order is ByteOrder.BIG
    assert fmt.container == "AIFF"


def test_garbage_is_unsupported(tmp_path: Path):
    path = tmp_path / "junk.wav"
    path.write_bytes(b"this is not audio" * 10)

    with pytest.raises(UnsupportedAudioFile):
        read_format(str(path))


# ---------------------------------------------------------------------
# WavFrameSource
# ---------------------------------------------------------------------

def test_blocks_are_whole_frames(tmp_path: Path):
    rows = [(i, -i) for i in range(10)]
    path = write_pcm_wav(tmp_path / "s.wav", rows, rate=44_100, width=3)

    with WavFrameSource(str(path)) as source:
        assert source.channels == 2
        assert source.frame_size_bytes == 6
        assert source.frame_count == 10
        blocks = list(source.blocks(block_frames=4))

    assert [len(b) for b in blocks] == [24, 24, 12]

    decoded = np.concatenate([decode_frames(b, 2, 6) for b in blocks])
    assert [tuple(r) for r in decoded.tolist()] == rows


def test_source_must_be_open(tmp_path: Path):
    path = write_pcm_wav(tmp_path / "s.wav", [(1,)], rate=44_100, width=2)
    source = WavFrameSource(str(path))

    with pytest.raises(RuntimeError):
        _ = source.channels


def test_source_rejects_non_wav(tmp_path: Path):
    path = tmp_path / "junk.wav"
    path.write_bytes(b"RIFF\x00\x00")

    with pytest.raises(UnsupportedAudioFile):
        WavFrameSource(str(path)).open()


def test_block_size_must_be_positive(tmp_path: Path):
    path = write_pcm_wav(tmp_path / "s.wav", [(1,)], rate=44_100, width=2)

    with WavFrameSource(str(path)) as source:
        with pytest.raises(ValueError):
            next(source.blocks(block_frames=0))


# ---------------------------------------------------------------------
# Extensible WAV and compressed containers
# ---------------------------------------------------------------------

def test_extensible_24bit_wav_streams_exact_samples(tmp_path: Path):
    path = tmp_path / "ext.wav"
    rng = np.random.default_rng(65534)
    samples = rng.integers(-8_388_608, 8_388_608, size=(300, 2), dtype=np.int32)
    # int32 input is left-justified by libsndfile; shift so PCM_24 keeps every bit
    sf.write(str(path), samples << 8, 48_000, format="WAVEX", subtype="PCM_24")

    fmt = read_format(str(path))
    assert fmt.container == "WAVEX"
    assert validate(fmt) == []

    with WavFrameSource(str(path)) as source:
        assert source.frame_size_bytes == 6
        blocks = list(source.blocks(block_frames=128))

    decoded = np.concatenate([decode_frames(b, 2, 6) for b in blocks])
    assert np.array_equal(decoded, samples)


def test_flac_is_not_pcm_signed(tmp_path: Path):
    path = tmp_path / "c.flac"
    sf.write(str(path), np.zeros((100, 2), dtype=np.int16), 48_000, format="FLAC", subtype="PCM_24")

    fmt = read_format(str(path))
    problems = validate(fmt)

    assert fmt.encoding is Encoding.OTHER
    assert problems == ["File must be a PCM Signed audio file.  This file is: OTHER (FLAC)"]
