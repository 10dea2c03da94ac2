# wasmpack

Helpers for turning a crate that has already been compiled to WebAssembly
into a package that can be published to npm.

## Modules

- `wasmpack.manifest` reads `Cargo.toml`.
  - `parse_crate_data(manifest_path)` and `parse_manifest_text(text)` return a
    `ManifestAndUnusedKeys`. It holds a `CargoManifest` and the set of
    `package.metadata.wasm-pack` keys (or near-misses of that key) that were
    not understood.
  - `warn_for_unused_keys` prints a warning for each of those keys.
  - Invalid values raise `ManifestError`.
- `wasmpack.manifest.CrateData(crate_path, out_name, metadata)` describes one
  crate. If `metadata` is `None`, it runs `cargo metadata` to fill it in.
  - `crate_name()`, `name_prefix()`, `crate_license()`, `crate_license_file()`,
    `target_directory()` and `workspace_root()` report facts about the crate.
  - `check_crate_config()` raises unless the crate builds a `cdylib`.
  - `configured_profile(BuildProfile.DEV | RELEASE | PROFILING)` returns a
    `CargoWasmPackProfile` with the `wasm-bindgen` flags and `wasm_opt_args()`.
  - `npm_package(out_dir, scope, disable_dts, target)` builds the
    `package.json` contents for a `Target` (`NODEJS`, `NO_MODULES`, `BUNDLER`,
    `WEB`, `DENO`). `write_package_json(...)` writes it to
    `out_dir/package.json`. Nothing is written for `DENO`.
- `wasmpack.npm_package` holds the three `package.json` shapes:
  `CommonJSPackage`, `ESModulesPackage` and `NoModulesPackage`, together with
  `Repository` and `to_json(package)`.
- `wasmpack.license.copy_from_crate(crate_data, path, out_dir)` copies
  `LICENSE*` files, or the file named by `license-file`. `glob_license_files`
  lists the candidates.
- `wasmpack.readme.copy_from_crate(path, out_dir)` copies `README.md`. It
  warns if the file is missing.
- `wasmpack.lockfile` reads `Cargo.lock`.
  - `read_lockfile(crate_data)` and `parse_lockfile(text)` return a `Lockfile`.
  - Its methods are `package_version(name)`, `wasm_bindgen_version()`,
    `require_wasm_bindgen()` and `wasm_bindgen_test_version()`.
  - Errors raise `LockfileError`.
- `wasmpack.npm` runs `npm pack`, `npm publish` and `npm login` through
  `npm_pack`, `npm_publish` and `npm_login`. Failures raise `NpmError`.
- `wasmpack.stamps` is a small JSON key/value store in a `*.stamps` file. It
  provides `get_stamps_file_path`, `read_stamps_file`, `get_stamp_value` and
  `save_stamp_value`, and raises `StampError`.
- `wasmpack.version_check.latest_wasm_pack_version(stamp_path)` asks the
  crates registry for the newest release at most once every 24 hours. It
  records the time of each check in a `*.stamp` file.
- `wasmpack.progressbar` prints messages to standard error.
  - `ProgressOutput` has `info`, `warn` and `error`.
  - Messages are filtered by `quiet` and by a `LogLevel`; `parse_log_level`
    accepts `"error"`, `"warn"` and `"info"`.
  - The shared instance is `PBAR`.
- `wasmpack.target` reports the platform (`LINUX`, `MACOS`, `WINDOWS`,
  `X86_64`, `X86`).

## Installing

```
pip install .
```

## Self-installation

```
wasmpack-init [-f]
```

This looks up `rustup` on your `PATH` and copies the running program into the
same directory as `wasm-pack` (`wasm-pack.exe` on Windows).

- If that file already exists and standard input is a terminal, you are asked
  whether to overwrite it.
- Pass `-f` to overwrite without asking.
- Errors are printed, and the command always exits with status 0.

## Example

```python
from pathlib import Path
from wasmpack.manifest import CrateData, Target
from wasmpack import license, readme

crate = Path("my-crate")
out_dir = crate / "pkg"
out_dir.mkdir(exist_ok=True)

data = CrateData(crate, None, None)
data.check_crate_config()
license.copy_from_crate(data, crate, out_dir)
readme.copy_from_crate(crate, out_dir)
data.write_package_json(out_dir, None, False, Target.BUNDLER)
```

## What it does not do

- It does not compile crates, or run `wasm-bindgen` or `wasm-opt`. It only
  reads their settings from `Cargo.toml`.
- It does not download any tools.
- It does not run tests in a browser or under Node.js.
- There is no `build`, `test` or `publish` command-line interface. The npm
  steps are available only as Python functions.

## Running the tests

```
pip install .[test]
pytest
```