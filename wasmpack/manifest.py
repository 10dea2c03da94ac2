"""Reading ``Cargo.toml`` manifests and writing ``package.json`` files."""

from __future__ import annotations

import json
import subprocess
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from wasmpack.npm_package import (
    CommonJSPackage,
    ESModulesPackage,
    NoModulesPackage,
    NpmPackage,
    Repository,
    to_json,
)
from wasmpack.progressbar import PBAR

WASM_PACK_METADATA_KEY = "package.metadata.wasm-pack"
_LEVENSHTEIN_THRESHOLD = 1


class ManifestError(Exception):
    """Raised when a crate's manifest or metadata is missing or invalid."""


class Target(Enum):
    """The JavaScript environment a build is meant for."""

    NODEJS = "nodejs"
    NO_MODULES = "no-modules"
    BUNDLER = "bundler"
    WEB = "web"
    DENO = "deno"


class BuildProfile(Enum):
    """The build profile whose settings apply."""

    DEV = "dev"
    RELEASE = "release"
    PROFILING = "profiling"


@dataclass(frozen=True)
class CargoWasmPackProfile:
    """Settings for the tools run after compiling, for one build profile."""

    debug_js_glue: bool
    demangle_name_section: bool
    dwarf_debug_info: bool
    wasm_opt: bool | tuple[str, ...] | None = None

    def wasm_opt_args(self) -> list[str] | None:
        """Arguments for ``wasm-opt``, or ``None`` when it should not run."""
        if self.wasm_opt is None or self.wasm_opt is False:
            return None
        if self.wasm_opt is True:
            return ["-O"]
        return list(self.wasm_opt)


_DEFAULT_PROFILES = {
    BuildProfile.DEV: CargoWasmPackProfile(
        debug_js_glue=True, demangle_name_section=True, dwarf_debug_info=False, wasm_opt=None
    ),
    BuildProfile.RELEASE: CargoWasmPackProfile(
        debug_js_glue=False, demangle_name_section=True, dwarf_debug_info=False, wasm_opt=True
    ),
    BuildProfile.PROFILING: CargoWasmPackProfile(
        debug_js_glue=False, demangle_name_section=True, dwarf_debug_info=False, wasm_opt=True
    ),
}

_BINDGEN_KEYS = {
    "debug-js-glue": "debug_js_glue",
    "demangle-name-section": "demangle_name_section",
    "dwarf-debug-info": "dwarf_debug_info",
}


@dataclass
class CargoManifest:
    """The parts of ``Cargo.toml`` that packaging uses."""

    name: str
    description: str | None = None
    license: str | None = None
    license_file: str | None = None
    repository: str | None = None
    homepage: str | None = None
    profiles: dict[BuildProfile, CargoWasmPackProfile] = field(
        default_factory=lambda: dict(_DEFAULT_PROFILES)
    )


@dataclass
class ManifestAndUnusedKeys:
    """A parsed manifest together with the wasm-pack keys it did not understand."""

    manifest: CargoManifest
    unused_keys: set[str] = field(default_factory=set)


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (ca != cb))
            )
        previous = current
    return previous[-1]


def _record_ignored(path: str, unused: set[str]) -> None:
    if path.startswith("package.metadata") and (
        "wasm-pack" in path or levenshtein(WASM_PACK_METADATA_KEY, path) <= _LEVENSHTEIN_THRESHOLD
    ):
        unused.add(path)


def _table(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ManifestError(f"invalid type for key `{path}`: expected a table")
    return value


def _optional_str(table: dict[str, Any], key: str, path: str) -> str | None:
    value = table.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ManifestError(f"invalid type for key `{path}.{key}`: expected a string")


def _parse_profile(
    value: Any, defaults: CargoWasmPackProfile, path: str, unused: set[str]
) -> CargoWasmPackProfile:
    table = _table(value, path)
    flags: dict[str, bool] = {}
    wasm_opt: bool | tuple[str, ...] | None = None
    for key, item in table.items():
        key_path = f"{path}.{key}"
        if key == "wasm-bindgen":
            for bkey, bvalue in _table(item, key_path).items():
                attr = _BINDGEN_KEYS.get(bkey)
                if attr is None:
                    _record_ignored(f"{key_path}.{bkey}", unused)
                    continue
                if not isinstance(bvalue, bool):
                    raise ManifestError(
                        f"invalid type for key `{key_path}.{bkey}`: expected a boolean"
                    )
                flags[attr] = bvalue
        elif key == "wasm-opt":
            if isinstance(item, bool):
                wasm_opt = item
            elif isinstance(item, list) and all(isinstance(arg, str) for arg in item):
                wasm_opt = tuple(item)
            else:
                raise ManifestError(
                    f"invalid type for key `{key_path}`: "
                    "expected a boolean or an array of strings"
                )
        else:
            _record_ignored(key_path, unused)
    return CargoWasmPackProfile(
        debug_js_glue=flags.get("debug_js_glue", defaults.debug_js_glue),
        demangle_name_section=flags.get("demangle_name_section", defaults.demangle_name_section),
        dwarf_debug_info=flags.get("dwarf_debug_info", defaults.dwarf_debug_info),
        wasm_opt=wasm_opt if wasm_opt is not None else defaults.wasm_opt,
    )


def _parse_profiles(
    metadata: dict[str, Any], unused: set[str]
) -> dict[BuildProfile, CargoWasmPackProfile]:
    profiles = dict(_DEFAULT_PROFILES)
    for key, value in metadata.items():
        if key != "wasm-pack":
            _record_ignored(f"package.metadata.{key}", unused)
            continue
        wasm_pack_path = "package.metadata.wasm-pack"
        for wkey, wvalue in _table(value, wasm_pack_path).items():
            if wkey != "profile":
                _record_ignored(f"{wasm_pack_path}.{wkey}", unused)
                continue
            profile_path = f"{wasm_pack_path}.profile"
            for pkey, pvalue in _table(wvalue, profile_path).items():
                try:
                    profile = BuildProfile(pkey)
                except ValueError:
                    _record_ignored(f"{profile_path}.{pkey}", unused)
                    continue
                profiles[profile] = _parse_profile(
                    pvalue, _DEFAULT_PROFILES[profile], f"{profile_path}.{pkey}", unused
                )
    return profiles


def parse_manifest_text(text: str) -> ManifestAndUnusedKeys:
    """Parse ``Cargo.toml`` text, collecting unknown wasm-pack keys."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(str(e)) from e

    unused: set[str] = set()
    for key in data:
        if key != "package":
            _record_ignored(key, unused)
    if "package" not in data:
        raise ManifestError("missing field `package`")
    package = _table(data["package"], "package")
    name = package.get("name")
    if name is None:
        raise ManifestError("missing field `name` in `package`")
    if not isinstance(name, str):
        raise ManifestError("invalid type for key `package.name`: expected a string")

    known = {"name", "description", "license", "license-file", "repository", "homepage", "metadata"}
    for key in package:
        if key not in known:
            _record_ignored(f"package.{key}", unused)

    metadata = _table(package.get("metadata", {}), "package.metadata")
    manifest = CargoManifest(
        name=name,
        description=_optional_str(package, "description", "package"),
        license=_optional_str(package, "license", "package"),
        license_file=_optional_str(package, "license-file", "package"),
        repository=_optional_str(package, "repository", "package"),
        homepage=_optional_str(package, "homepage", "package"),
        profiles=_parse_profiles(metadata, unused),
    )
    return ManifestAndUnusedKeys(manifest=manifest, unused_keys=unused)


def parse_crate_data(manifest_path: Path | str) -> ManifestAndUnusedKeys:
    """Read and parse the manifest at ``manifest_path``."""
    manifest_path = Path(manifest_path)
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"failed to read: {manifest_path}") from e
    try:
        return parse_manifest_text(text)
    except ManifestError as e:
        raise ManifestError(f"failed to parse manifest: {manifest_path}: {e}") from e


def warn_for_unused_keys(manifest_and_keys: ManifestAndUnusedKeys) -> None:
    """Warn about every unknown wasm-pack key."""
    for path in sorted(manifest_and_keys.unused_keys):
        PBAR.warn(
            f'"{path}" is an unknown key and will be ignored. Please check your Cargo.toml.'
        )


def _cargo_metadata(manifest_path: Path) -> dict[str, Any]:
    try:
        result = subprocess.run(
            ["cargo", "metadata", "--format-version", "1", "--manifest-path", str(manifest_path)],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ManifestError(f"failed to run `cargo metadata`: {e}") from e
    if result.returncode != 0:
        raise ManifestError(f"`cargo metadata` failed: {result.stderr.strip()}")
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ManifestError("`cargo metadata` produced invalid JSON") from e


def _is_same_path(path1: Path, path2: Path) -> bool:
    try:
        return path1.resolve(strict=True) == path2.resolve(strict=True)
    except OSError:
        return path1 == path2


class CrateData:
    """Everything learned about a crate from its manifest and cargo metadata."""

    def __init__(
        self,
        crate_path: Path | str,
        out_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        crate_path = Path(crate_path)
        manifest_path = crate_path / "Cargo.toml"
        if not manifest_path.is_file():
            raise ManifestError(
                f"crate directory is missing a `Cargo.toml` file; is `{crate_path}` "
                "the wrong directory?"
            )
        if metadata is None:
            metadata = _cargo_metadata(manifest_path)

        manifest_and_keys = parse_crate_data(manifest_path)
        warn_for_unused_keys(manifest_and_keys)
        self.manifest = manifest_and_keys.manifest
        self.out_name = out_name
        self._metadata = metadata

        for pkg in metadata.get("packages", []):
            if pkg.get("name") == self.manifest.name and _is_same_path(
                Path(pkg.get("manifest_path", "")), manifest_path
            ):
                self._package = pkg
                break
        else:
            raise ManifestError("failed to find package in metadata")

    def configured_profile(self, profile: BuildProfile) -> CargoWasmPackProfile:
        """The wasm-pack settings configured for ``profile``."""
        return self.manifest.profiles[profile]

    def check_crate_config(self) -> None:
        """Raise unless the crate builds a ``cdylib``."""
        if any(
            "cdylib" in target.get("kind", []) and "cdylib" in target.get("crate_types", [])
            for target in self._package.get("targets", [])
        ):
            return
        raise ManifestError(
            "crate-type must be cdylib to compile to wasm32-unknown-unknown. Add the "
            "following to your Cargo.toml file:\n\n"
            "[lib]\n"
            'crate-type = ["cdylib", "rlib"]'
        )

    def crate_name(self) -> str:
        """The crate's library name, with dashes turned into underscores."""
        lib = next(
            (t for t in self._package.get("targets", []) if "cdylib" in t.get("kind", [])),
            None,
        )
        name = lib["name"] if lib is not None else self._package["name"]
        return name.replace("-", "_")

    def name_prefix(self) -> str:
        """Prefix for output file names."""
        return self.out_name if self.out_name is not None else self.crate_name()

    def crate_license(self) -> str | None:
        return self.manifest.license

    def crate_license_file(self) -> str | None:
        return self.manifest.license_file

    def target_directory(self) -> Path:
        """Where cargo places build artifacts."""
        return Path(self._metadata["target_directory"])

    def workspace_root(self) -> Path:
        """Root directory of the cargo workspace."""
        return Path(self._metadata["workspace_root"])

    def _license(self) -> str | None:
        if self.manifest.license is not None:
            return self.manifest.license
        if self.manifest.license_file is not None:
            return f"SEE LICENSE IN {self.manifest.license_file}"
        return None

    def _repository(self) -> Repository | None:
        if self.manifest.repository is None:
            return None
        return Repository(ty="git", url=self.manifest.repository)

    def _check_optional_fields(self) -> None:
        missing = []
        if self.manifest.description is None:
            missing.append("description")
        if self.manifest.repository is None:
            missing.append("repository")
        if self.manifest.license is None and self.manifest.license_file is None:
            missing.append("license")
        if len(missing) == 1:
            PBAR.info(
                f"Optional field missing from Cargo.toml: '{missing[0]}'. "
                "This is not necessary, but recommended"
            )
        elif len(missing) == 2:
            PBAR.info(
                f"Optional fields missing from Cargo.toml: '{missing[0]}', '{missing[1]}'. "
                "These are not necessary, but recommended"
            )
        elif len(missing) == 3:
            PBAR.info(
                f"Optional fields missing from Cargo.toml: '{missing[0]}', '{missing[1]}', "
                f"and '{missing[2]}'. These are not necessary, but recommended"
            )

    def npm_package(
        self,
        out_dir: Path | str,
        scope: str | None = None,
        disable_dts: bool = False,
        target: Target = Target.BUNDLER,
    ) -> NpmPackage | None:
        """The ``package.json`` contents for ``target``; ``None`` for Deno."""
        if target is Target.DENO:
            return None
        out_dir = Path(out_dir)
        prefix = self.name_prefix()
        js_file = f"{prefix}.js"
        files = [f"{prefix}_bg.wasm", js_file]
        if target is Target.BUNDLER:
            files.append(f"{prefix}_bg.js")

        pkg_name = self._package["name"]
        name = f"@{scope}/{pkg_name}" if scope is not None else pkg_name

        types = None
        if not disable_dts:
            types = f"{prefix}.d.ts"
            files.append(types)

        keywords = list(self._package.get("keywords") or []) or None

        if out_dir.is_dir():
            files.extend(
                sorted(
                    entry.name
                    for entry in out_dir.iterdir()
                    if entry.is_file()
                    and entry.name.startswith("LICENSE")
                    and entry.name != "LICENSE"
                )
            )

        self._check_optional_fields()
        common: dict[str, Any] = dict(
            name=name,
            collaborators=list(self._package.get("authors") or []),
            description=self.manifest.description,
            version=str(self._package["version"]),
            license=self._license(),
            repository=self._repository(),
            files=files,
            homepage=self.manifest.homepage,
            types=types,
            keywords=keywords,
        )
        if target is Target.NODEJS:
            return CommonJSPackage(main=js_file, **common)
        if target is Target.NO_MODULES:
            return NoModulesPackage(browser=js_file, **common)
        return ESModulesPackage(module=js_file, side_effects=False, **common)

    def write_package_json(
        self,
        out_dir: Path | str,
        scope: str | None = None,
        disable_dts: bool = False,
        target: Target = Target.BUNDLER,
    ) -> None:
        """Write ``package.json`` into ``out_dir`` (nothing for Deno)."""
        package = self.npm_package(out_dir, scope, disable_dts, target)
        if package is None:
            return
        pkg_file_path = Path(out_dir) / "package.json"
        try:
            pkg_file_path.write_text(to_json(package), encoding="utf-8")
        except OSError as e:
            raise ManifestError(f"failed to write: {pkg_file_path}") from e