"""
Application configuration.

Responsibilities:
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No detection thresholds (those live in spec.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from spec import READ_BLOCK_FRAMES_DEFAULT


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the analysis pipeline.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str = "dev"

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool = False

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    # Frames pulled from the container per read.
    read_block_frames: int = READ_BLOCK_FRAMES_DEFAULT

    def __post_init__(self) -> None:
        if self.read_block_frames <= 0:
            raise ValueError("read_block_frames must be > 0")

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if DROPOUT_READ_BLOCK_FRAMES is not a positive integer.
        """
        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "0") == "1",
            read_block_frames=int(
                os.environ.get("DROPOUT_READ_BLOCK_FRAMES", str(READ_BLOCK_FRAMES_DEFAULT))
            ),
        )
