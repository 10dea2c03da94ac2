"""Key-value store kept as JSON in a ``*.stamps`` file next to the program."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any


class StampError(Exception):
    """Raised when the stamps store cannot be read, parsed or written."""


def get_stamps_file_path() -> Path:
    """Path of the ``*.stamps`` file used as the store."""
    program = sys.argv[0] if sys.argv else ""
    if not program:
        raise StampError("cannot get stamps file path")
    return Path(program).resolve().with_suffix(".stamps")


def read_stamps_file(path: Path | str | None = None) -> Any:
    """Read the stamps file and return its parsed JSON content."""
    stamps_path = Path(path) if path is not None else get_stamps_file_path()
    try:
        content = stamps_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StampError("cannot find or read stamps file") from e
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise StampError("stamps file doesn't contain valid JSON") from e


def get_stamp_value(key: str, data: Any) -> str:
    """Return the string stored under ``key`` in data read from the stamps file."""
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, str):
        raise StampError(f"cannot get stamp value for key '{key}'")
    return value


def save_stamp_value(key: str, value: str, path: Path | str | None = None) -> None:
    """Store ``value`` under ``key``, keeping the other entries."""
    stamps_path = Path(path) if path is not None else get_stamps_file_path()
    try:
        data = read_stamps_file(stamps_path)
    except StampError:
        data = {}
    if not isinstance(data, dict):
        raise StampError("stamps file doesn't contain JSON object")
    data[key] = value
    try:
        stamps_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        raise StampError("cannot write to stamps file") from e