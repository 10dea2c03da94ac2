"""Packaging helpers for crates compiled to WebAssembly: manifests, package.json, licences, READMEs, lock files and npm."""

__version__ = "0.1.0"