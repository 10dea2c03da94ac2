[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wasmpack"
version = "0.1.0"
description = "Packaging helpers for crates compiled to WebAssembly: Cargo.toml reading, package.json generation, licence and README copying, npm commands."
requires-python = ">=3.11"
dependencies = []
keywords = ["wasm", "webassembly", "npm", "cargo", "packaging", "package.json"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wasmpack-init = "wasmpack.installer:main"

[tool.hatch.build.targets.wheel]
packages = ["wasmpack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
