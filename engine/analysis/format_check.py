"""
Format gate for dropout analysis.

Pure validation: every check runs (no short-circuit) so the user sees all
problems with a file at once. An empty result means the format is accepted.
"""

from __future__ import annotations

from audio.format import ByteOrder, Encoding, FormatDescriptor
from spec import (
    SUPPORTED_BITS_PER_SAMPLE,
    SUPPORTED_CHANNEL_COUNTS,
    SUPPORTED_SAMPLE_RATES_HZ,
)


def validate(fmt: FormatDescriptor) -> list[str]:
    """
    Return one human-readable problem per unsupported property of `fmt`.
    """
    problems: list[str] = []

    if fmt.encoding is not Encoding.PCM_SIGNED:
        found = fmt.encoding.value
        if fmt.container:
            found += f" ({fmt.container})"
        problems.append(f"File must be a PCM Signed audio file.  This file is: {found}")

    if fmt.byte_order is ByteOrder.BIG:
        problems.append("File must be little endian.  This file is big endian.")

    if fmt.sample_rate_hz not in SUPPORTED_SAMPLE_RATES_HZ:
        problems.append(
            "File sample rate must be 44.1kHz or 48kHz.  "
            f"This file is: {float(fmt.sample_rate_hz)}Hz"
        )

    if fmt.channels not in SUPPORTED_CHANNEL_COUNTS:
        problems.append(
            "File must be mono or stereo.  "
            f"This file has: {fmt.channels} channels"
        )

    if fmt.bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
        problems.append(
            "File must be a 16 bit or 24 bit recording.  "
            f"This file is: {fmt.bits_per_sample} bit"
        )

    return problems
