"""Installing the running executable next to ``rustup`` on the ``PATH``."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

from wasmpack import target


class InstallError(Exception):
    """Raised when self-installation cannot proceed."""


def _current_exe() -> Path:
    program = sys.argv[0] if sys.argv else ""
    if not program:
        raise InstallError("cannot determine the running executable")
    return Path(program).resolve()


def confirm_can_overwrite(dst: Path | str, force: bool = False) -> None:
    """Return if ``dst`` may be overwritten; raise ``InstallError`` otherwise."""
    if force:
        return
    if not sys.stdin.isatty():
        raise InstallError(
            f"existing wasm-pack installation found at `{dst}`, pass `-f` to force "
            "installation over this file, otherwise aborting installation now"
        )
    print(f"info: existing wasm-pack installation found at `{dst}`", file=sys.stderr)
    print("info: would you like to overwrite this file? [y/N]: ", end="", file=sys.stderr, flush=True)
    try:
        line = sys.stdin.readline()
    except OSError as e:
        raise InstallError("failed to read stdin") from e
    if line.startswith(("y", "Y")):
        return
    raise InstallError("aborting installation")


def do_install(force: bool = False) -> Path:
    """Copy the running executable into the directory holding ``rustup``."""
    rustup = shutil.which("rustup")
    if rustup is None:
        raise InstallError(
            "failed to find an installation of `rustup` in `PATH`, "
            "is rustup already installed?"
        )
    rustup_path = Path(rustup)
    installation_dir = rustup_path.parent
    if installation_dir == rustup_path:
        raise InstallError("can't install when `rustup` is at the root of the filesystem")
    destination = installation_dir / ("wasm-pack.exe" if target.WINDOWS else "wasm-pack")

    if destination.exists():
        confirm_can_overwrite(destination, force)

    me = _current_exe()
    try:
        shutil.copy(me, destination)
    except OSError as e:
        raise InstallError(f"failed to copy executable to `{destination}`") from e
    print(f"info: successfully installed wasm-pack to `{destination}`")
    return destination


def main(argv: list[str] | None = None) -> int:
    """Run the installer, report any error, and always finish with status 0."""
    args = sys.argv[1:] if argv is None else argv
    try:
        do_install(force="-f" in args)
    except InstallError as e:
        print(e, file=sys.stderr)
        cause = e.__cause__
        while cause is not None:
            print(f"Caused by: {cause}", file=sys.stderr)
            cause = cause.__cause__

    # A console window opened for the installer would vanish before it could be read.
    if target.WINDOWS:
        print("Press enter to close this window...")
        try:
            sys.stdin.readline()
        except OSError:
            pass
    return 0