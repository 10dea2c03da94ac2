"""The ``package.json`` documents written for each build target."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class Repository:
    """Source repository entry of a ``package.json``."""

    ty: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.ty, "url": self.url}


def _package_dict(pkg: Any, entry_key: str, entry_value: str, side_effects: bool | None = None) -> dict[str, Any]:
    out: dict[str, Any] = {"name": pkg.name}
    if pkg.collaborators:
        out["collaborators"] = list(pkg.collaborators)
    if pkg.description is not None:
        out["description"] = pkg.description
    out["version"] = pkg.version
    if pkg.license is not None:
        out["license"] = pkg.license
    if pkg.repository is not None:
        out["repository"] = pkg.repository.to_dict()
    if pkg.files:
        out["files"] = list(pkg.files)
    out[entry_key] = entry_value
    if pkg.homepage is not None:
        out["homepage"] = pkg.homepage
    if pkg.types is not None:
        out["types"] = pkg.types
    if side_effects is not None:
        out["sideEffects"] = side_effects
    if pkg.keywords is not None:
        out["keywords"] = list(pkg.keywords)
    return out


@dataclass(kw_only=True)
class CommonJSPackage:
    """``package.json`` for Node.js (CommonJS) output."""

    name: str
    version: str
    main: str
    collaborators: list[str] = field(default_factory=list)
    description: str | None = None
    license: str | None = None
    repository: Repository | None = None
    files: list[str] = field(default_factory=list)
    homepage: str | None = None
    types: str | None = None
    keywords: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _package_dict(self, "main", self.main)


@dataclass(kw_only=True)
class ESModulesPackage:
    """``package.json`` for bundler and web (ES module) output."""

    name: str
    version: str
    module: str
    collaborators: list[str] = field(default_factory=list)
    description: str | None = None
    license: str | None = None
    repository: Repository | None = None
    files: list[str] = field(default_factory=list)
    homepage: str | None = None
    types: str | None = None
    side_effects: bool = False
    keywords: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _package_dict(self, "module", self.module, self.side_effects)


@dataclass(kw_only=True)
class NoModulesPackage:
    """``package.json`` for no-modules (browser global) output."""

    name: str
    version: str
    browser: str
    collaborators: list[str] = field(default_factory=list)
    description: str | None = None
    license: str | None = None
    repository: Repository | None = None
    files: list[str] = field(default_factory=list)
    homepage: str | None = None
    types: str | None = None
    keywords: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _package_dict(self, "browser", self.browser)


NpmPackage = Union[CommonJSPackage, ESModulesPackage, NoModulesPackage]


def to_json(package: NpmPackage) -> str:
    """Serialize a package description as pretty-printed JSON."""
    return json.dumps(package.to_dict(), indent=2, ensure_ascii=False)