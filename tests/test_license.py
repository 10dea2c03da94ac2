from pathlib import Path

import pytest

from wasmpack import license
from wasmpack.manifest import CrateData


def _make_crate(root: Path, license_line: str, files: dict[str, str]) -> CrateData:
    root.mkdir(parents=True, exist_ok=True)
    manifest_path = root / "Cargo.toml"
    manifest_path.write_text(
        "[package]\n"
        'name = "js-hello-world"\n'
        'version = "0.1.0"\n'
        'description = "so awesome rust+wasm package"\n'
        'repository = "https://example.com/demo.git"\n'
        f"{license_line}\n",
        encoding="utf-8",
    )
    for name, content in files.items():
        (root / name).write_text(content, encoding="utf-8")
    metadata = {
        "packages": [
            {
                "name": "js-hello-world",
                "version": "0.1.0",
                "manifest_path": str(manifest_path),
                "targets": [],
            }
        ],
        "workspace_root": str(root),
        "target_directory": str(root / "target"),
    }
    return CrateData(root, None, metadata)


def _single_license(tmp_path):
    root = tmp_path / "crate"
    return root, _make_crate(root, 'license = "WTFPL"', {"LICENSE": "single license text\n"})


def _dual_license(tmp_path):
    root = tmp_path / "crate"
    return root, _make_crate(
        root,
        'license = "MIT/WTFPL"',
        {"LICENSE-WTFPL": "wtfpl text\n", "LICENSE-MIT": "mit text\n"},
    )


def _out_dir(root: Path) -> Path:
    out_dir = root / "pkg"
    out_dir.mkdir()
    return out_dir


@pytest.mark.parametrize("variant", ["default_path", "provided_path"])
def test_it_copies_a_license(tmp_path, variant):
    root, crate_data = _single_license(tmp_path)
    out_dir = _out_dir(root)
    license.copy_from_crate(crate_data, root, out_dir)

    crate_license_path = root / "LICENSE"
    pkg_license_path = out_dir / "LICENSE"
    assert crate_license_path.is_file()
    assert pkg_license_path.is_file()
    assert crate_license_path.read_bytes() == pkg_license_path.read_bytes()


@pytest.mark.parametrize("variant", ["default_path", "provided_path"])
def test_it_copies_all_licenses(tmp_path, variant):
    root, crate_data = _dual_license(tmp_path)
    out_dir = _out_dir(root)
    license.copy_from_crate(crate_data, root, out_dir)

    for name in ("LICENSE-WTFPL", "LICENSE-MIT"):
        crate_license_path = root / name
        pkg_license_path = out_dir / name
        assert crate_license_path.is_file()
        assert pkg_license_path.is_file()
        assert crate_license_path.read_bytes() == pkg_license_path.read_bytes()


def test_it_copies_a_non_standard_license_provided_path(tmp_path):
    license_file = "NON-STANDARD-LICENSE"
    root = tmp_path / "crate"
    crate_data = _make_crate(
        root, f'license-file = "{license_file}"', {license_file: "custom terms\n"}
    )
    out_dir = _out_dir(root)
    license.copy_from_crate(crate_data, root, out_dir)

    crate_license_path = root / license_file
    pkg_license_path = out_dir / license_file
    assert crate_license_path.is_file()
    assert pkg_license_path.is_file()
    assert crate_license_path.read_bytes() == pkg_license_path.read_bytes()


def test_glob_license_files_lists_sorted_names(tmp_path):
    root, _ = _dual_license(tmp_path)
    assert license.glob_license_files(root) == ["LICENSE-MIT", "LICENSE-WTFPL"]


def test_glob_license_files_ignores_other_files(tmp_path):
    root, _ = _single_license(tmp_path)
    assert license.glob_license_files(root) == ["LICENSE"]


def test_license_key_without_files_reports_and_copies_nothing(tmp_path, capsys):
    root = tmp_path / "crate"
    crate_data = _make_crate(root, 'license = "MIT"', {})
    out_dir = _out_dir(root)
    license.copy_from_crate(crate_data, root, out_dir)

    assert list(out_dir.iterdir()) == []
    assert "no LICENSE file(s) were found" in capsys.readouterr().err


def test_missing_license_file_reports(tmp_path, capsys):
    root = tmp_path / "crate"
    crate_data = _make_crate(root, 'license-file = "MISSING"', {})
    out_dir = _out_dir(root)
    license.copy_from_crate(crate_data, root, out_dir)

    assert list(out_dir.iterdir()) == []
    assert "origin crate has no LICENSE" in capsys.readouterr().err


def test_no_license_configured_copies_nothing(tmp_path):
    root = tmp_path / "crate"
    crate_data = _make_crate(root, "", {"LICENSE": "text\n"})
    out_dir = _out_dir(root)
    license.copy_from_crate(crate_data, root, out_dir)
    assert list(out_dir.iterdir()) == []


def test_missing_out_dir_is_an_error(tmp_path):
    root, crate_data = _single_license(tmp_path)
    with pytest.raises(NotADirectoryError, match="pkg directory should exist"):
        license.copy_from_crate(crate_data, root, root / "pkg")


def test_missing_crate_dir_is_an_error(tmp_path):
    root, crate_data = _single_license(tmp_path)
    out_dir = _out_dir(root)
    with pytest.raises(NotADirectoryError, match="crate directory should exist"):
        license.copy_from_crate(crate_data, tmp_path / "nowhere", out_dir)