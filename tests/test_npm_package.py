import json

from wasmpack.npm_package import (
    CommonJSPackage,
    ESModulesPackage,
    NoModulesPackage,
    Repository,
    to_json,
)


def test_repository_uses_type_key():
    repo = Repository(ty="git", url="https://example.com/repo.git")
    assert repo.to_dict() == {"type": "git", "url": "https://example.com/repo.git"}


def test_esmodules_full_order_and_keys():
    pkg = ESModulesPackage(
        name="js-hello-world",
        collaborators=["someone"],
        description="desc",
        version="0.1.0",
        license="WTFPL",
        repository=Repository(ty="git", url="https://example.com/r.git"),
        files=["js_hello_world_bg.wasm", "js_hello_world.js"],
        module="js_hello_world.js",
        homepage="https://example.com/",
        types="js_hello_world.d.ts",
        keywords=["wasm"],
    )
    data = pkg.to_dict()
    assert list(data) == [
        "name",
        "collaborators",
        "description",
        "version",
        "license",
        "repository",
        "files",
        "module",
        "homepage",
        "types",
        "sideEffects",
        "keywords",
    ]
    assert data["sideEffects"] is False
    assert data["repository"]["type"] == "git"


def test_optional_and_empty_fields_are_skipped():
    pkg = CommonJSPackage(name="a", version="1.0.0", main="a.js")
    assert pkg.to_dict() == {"name": "a", "version": "1.0.0", "main": "a.js"}


def test_esmodules_always_has_side_effects():
    pkg = ESModulesPackage(name="a", version="1.0.0", module="a.js")
    assert pkg.to_dict()["sideEffects"] is False


def test_nomodules_uses_browser_key():
    pkg = NoModulesPackage(name="a", version="1.0.0", browser="a.js", types="a.d.ts")
    data = pkg.to_dict()
    assert data["browser"] == "a.js"
    assert "main" not in data and "module" not in data
    assert data["types"] == "a.d.ts"


def test_to_json_round_trip():
    pkg = CommonJSPackage(
        name="@scope/a",
        version="1.0.0",
        main="a.js",
        files=["a_bg.wasm", "a.js"],
        keywords=["wasm"],
    )
    text = to_json(pkg)
    assert json.loads(text) == pkg.to_dict()
    assert text.startswith("{\n  \"name\"")