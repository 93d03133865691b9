"""
SPEC-AS-CONSTANTS
-----------------
Single source of truth for all behavioral invariants in the detector.

Rules:
- If changing a value changes detection or reporting behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final, Tuple

# =============================================================================
# Supported input formats
# =============================================================================

SUPPORTED_SAMPLE_RATES_HZ: Final[Tuple[float, ...]] = (44_100.0, 48_000.0)
SUPPORTED_CHANNEL_COUNTS: Final[Tuple[int, ...]] = (1, 2)
SUPPORTED_BITS_PER_SAMPLE: Final[Tuple[int, ...]] = (16, 24)

# =============================================================================
# Sample decoding
# =============================================================================

# Samples are widened into a signed 32-bit word before sign extension.
DECODE_WORD_BYTES: Final[int] = 4
MAX_SAMPLE_WIDTH_BYTES: Final[int] = DECODE_WORD_BYTES

# =============================================================================
# Dropout detection
# =============================================================================

# A run is a dropout when its repeat count is strictly greater than this.
DROPOUT_REPEAT_THRESHOLD: Final[int] = 4

# Sample index assigned to the first (seed) frame of a stream.
FIRST_SAMPLE_INDEX: Final[int] = 1

# =============================================================================
# Reporting
# =============================================================================

REPORT_DEBOUNCE_S: Final[float] = 1.0

# Must sit more than one debounce window before t=0.
REPORT_INITIAL_LAST_TIME_S: Final[float] = -2.0

NO_DROPOUTS_MESSAGE: Final[str] = "No Dropouts Detected."

# =============================================================================
# I/O
# =============================================================================

READ_BLOCK_FRAMES_DEFAULT: Final[int] = 4096


# =============================================================================
# Helper Functions
# =============================================================================

def sample_position_to_seconds(sample_position: int, sample_rate_hz: float) -> float:
    """
    Convert a 1-based sample position into seconds from the start of the file.
    """
    return sample_position / sample_rate_hz
