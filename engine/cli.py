"""
Command-line entry point.

Usage:
    dropout-detector myfile.wav

Scans one WAV file for runs of identical sample values (digital dropouts)
and prints their approximate positions.

Exit codes:
    0  analysis ran, or the format was rejected (problems are printed)
    1  the file could not be read or parsed
    2  bad arguments (argparse)
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional, Sequence

from analysis.pipeline import analyze_file
from audio.wav_reader import UnsupportedAudioFile
from config import AppConfig
from observability import logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dropout-detector",
        description="Search a PCM WAV file for runs of identical samples (digital dropouts).",
    )
    parser.add_argument("filename", help="path to a 16/24-bit PCM WAV file")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="emit structured JSONL logs on stderr",
    )
    return parser


def _is_readable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.R_OK)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    config = AppConfig.load_from_env()
    logger.set_enabled(config.enable_json_logs or args.json_logs)

    if not _is_readable(args.filename):
        print("Cannot read file.  Are the path and name correct?")
        return 1

    try:
        result = analyze_file(args.filename, config=config)
    except UnsupportedAudioFile as exc:
        print(f"Unsupported Audio File. {exc}")
        return 1
    except OSError as exc:
        print(f"IO Exception reading bytes from file. {exc}")
        return 1

    if not result.accepted:
        for problem in result.problems:
            print(problem)
        return 0

    print(result.fmt.describe())
    for line in result.lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
