"""Reading the ``Cargo.lock`` file of a crate's workspace."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class LockfileError(Exception):
    """Raised when the lock file is missing, unreadable or malformed."""


@dataclass(frozen=True)
class Lockfile:
    """The locked packages listed in ``Cargo.lock``, as (name, version) pairs."""

    packages: tuple[tuple[str, str], ...] = ()

    def package_version(self, name: str) -> str | None:
        """Version of the first locked package called ``name``."""
        return next((version for pkg, version in self.packages if pkg == name), None)

    def wasm_bindgen_version(self) -> str | None:
        """Locked version of ``wasm-bindgen``."""
        return self.package_version("wasm-bindgen")

    def require_wasm_bindgen(self) -> str:
        """Locked version of ``wasm-bindgen``; raises if it is not a dependency."""
        version = self.wasm_bindgen_version()
        if version is None:
            raise LockfileError(
                'Ensure that you have "wasm-bindgen" as a dependency in your Cargo.toml file:\n'
                "[dependencies]\n"
                'wasm-bindgen = "0.2"'
            )
        return version

    def wasm_bindgen_test_version(self) -> str | None:
        """Locked version of ``wasm-bindgen-test``."""
        return self.package_version("wasm-bindgen-test")


def parse_lockfile(text: str) -> Lockfile:
    """Parse the text of a ``Cargo.lock`` file."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise LockfileError(str(e)) from e
    if "package" not in data:
        raise LockfileError("missing field `package`")
    entries = data["package"]
    if not isinstance(entries, list):
        raise LockfileError("invalid type for `package`: expected an array of tables")
    packages = []
    for entry in entries:
        packages.append((_string_field(entry, "name"), _string_field(entry, "version")))
    return Lockfile(tuple(packages))


def _string_field(entry: Any, key: str) -> str:
    if not isinstance(entry, dict):
        raise LockfileError("invalid type for `package` entry: expected a table")
    if key not in entry:
        raise LockfileError(f"missing field `{key}`")
    value = entry[key]
    if not isinstance(value, str):
        raise LockfileError(f"invalid type for `{key}`: expected a string")
    return value


def read_lockfile(crate_data: Any) -> Lockfile:
    """Read ``Cargo.lock`` from the root of the crate's workspace."""
    lock_path = Path(crate_data.workspace_root()) / "Cargo.lock"
    if not lock_path.is_file():
        raise LockfileError(f"Could not find lockfile at {str(lock_path)!r}")
    try:
        text = lock_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LockfileError(f"failed to read: {lock_path}") from e
    try:
        return parse_lockfile(text)
    except LockfileError as e:
        raise LockfileError(f"failed to parse: {lock_path}") from e