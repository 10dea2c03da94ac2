"""Checking for a newer release, rate-limited through a ``*.stamp`` file."""

from __future__ import annotations

import json
import re
import sys
import urllib.error
import urllib.request
from datetime import datetime
from importlib import metadata
from pathlib import Path

CRATES_API_URL = "https://crates.io/api/v1/crates/wasm-pack"
_MAX_AGE_HOURS = 24


class VersionCheckError(Exception):
    """Raised when the latest version cannot be determined."""


def _own_version() -> str:
    try:
        return metadata.version("wasmpack")
    except metadata.PackageNotFoundError:
        return "unknown"


def _default_stamp_path() -> Path:
    program = sys.argv[0] if sys.argv else ""
    return Path(program or "wasm-pack").resolve().with_suffix(".stamp")


def stamp_file_value(contents: str, word: str) -> str | None:
    """Second whitespace-separated token of the first line starting with ``word``."""
    line = next((l for l in contents.splitlines() if l.startswith(word)), None)
    if line is None:
        return None
    parts = line.split()
    return parts[1] if len(parts) > 1 else None


def _parse_timestamp(text: str) -> datetime | None:
    # Trim fractional seconds beyond microsecond precision.
    text = re.sub(r"(\.\d{6})\d+", r"\1", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else None


def fetch_latest_version() -> str:
    """Ask the crates registry for the newest published version."""
    request = urllib.request.Request(
        CRATES_API_URL,
        headers={"User-Agent": f"wasm-pack/{_own_version()}"},
    )
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            status = response.status
            body = response.read()
    except urllib.error.HTTPError as e:
        status, body = e.code, b""
    except (urllib.error.URLError, OSError) as e:
        raise VersionCheckError(f"failed to check for a newer version: {e}") from e

    if not 200 <= status < 300:
        raise VersionCheckError(
            f"Received a bad HTTP status code ({status}) when checking for newer "
            f"wasm-pack version at: {CRATES_API_URL}"
        )
    try:
        return json.loads(body.decode("utf-8", errors="replace"))["crate"]["max_version"]
    except (ValueError, KeyError, TypeError) as e:
        raise VersionCheckError("unexpected response from the crates registry") from e


def write_stamp_file(path: Path | str, current_time: datetime, version: str | None) -> None:
    """Replace the stamp file with the check time and, if known, the version."""
    lines = [f"created {current_time.isoformat()}"]
    if version is not None:
        lines.append(f"version {version}")
    Path(path).write_text("\n".join(lines), encoding="utf-8")


def _api_call(stamp_path: Path, current_time: datetime) -> str:
    try:
        version = fetch_latest_version()
    except VersionCheckError:
        # The time is stamped on failure too, so a failing check is also rate-limited.
        try:
            write_stamp_file(stamp_path, current_time, None)
        except OSError:
            pass
        raise
    try:
        write_stamp_file(stamp_path, current_time, version)
    except OSError:
        pass
    return version


def latest_wasm_pack_version(stamp_path: Path | str | None = None) -> str | None:
    """Latest known version, fetched at most once per day."""
    path = Path(stamp_path) if stamp_path is not None else _default_stamp_path()
    current_time = datetime.now().astimezone()
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return _api_call(path, current_time)

    created = stamp_file_value(contents, "created")
    last_updated = _parse_timestamp(created) if created is not None else None
    if last_updated is None:
        return None
    hours = int((current_time - last_updated).total_seconds() / 3600)
    if hours > _MAX_AGE_HOURS:
        return _api_call(path, current_time)
    return stamp_file_value(contents, "version")