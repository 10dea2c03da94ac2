import io
import json
import urllib.error
from datetime import datetime, timedelta
from unittest import mock

import pytest

from wasmpack.version_check import (
    VersionCheckError,
    fetch_latest_version,
    latest_wasm_pack_version,
    stamp_file_value,
    write_stamp_file,
)


def _response(payload, status=200):
    resp = mock.MagicMock()
    resp.status = status
    resp.read.return_value = json.dumps(payload).encode()
    cm = mock.MagicMock()
    cm.__enter__.return_value = resp
    cm.__exit__.return_value = False
    return cm


def test_stamp_file_value_finds_word():
    contents = "created 2021-01-01T00:00:00+00:00\nversion 0.9.1"
    assert stamp_file_value(contents, "version") == "0.9.1"
    assert stamp_file_value(contents, "created") == "2021-01-01T00:00:00+00:00"


def test_stamp_file_value_missing():
    assert stamp_file_value("created x", "version") is None


def test_write_stamp_file_round_trip(tmp_path):
    path = tmp_path / "tool.stamp"
    now = datetime.now().astimezone()
    write_stamp_file(path, now, "1.2.3")
    contents = path.read_text()
    assert stamp_file_value(contents, "version") == "1.2.3"
    assert datetime.fromisoformat(stamp_file_value(contents, "created")) == now


def test_write_stamp_file_without_version(tmp_path):
    path = tmp_path / "tool.stamp"
    write_stamp_file(path, datetime.now().astimezone(), None)
    assert stamp_file_value(path.read_text(), "version") is None


def test_fresh_stamp_uses_stored_version(tmp_path):
    path = tmp_path / "tool.stamp"
    write_stamp_file(path, datetime.now().astimezone(), "5.6.7")
    with mock.patch("urllib.request.urlopen") as urlopen:
        assert latest_wasm_pack_version(path) == "5.6.7"
        urlopen.assert_not_called()


def test_fresh_stamp_without_version(tmp_path):
    path = tmp_path / "tool.stamp"
    write_stamp_file(path, datetime.now().astimezone(), None)
    with mock.patch("urllib.request.urlopen") as urlopen:
        assert latest_wasm_pack_version(path) is None
        urlopen.assert_not_called()


def test_unparsable_created_gives_none(tmp_path):
    path = tmp_path / "tool.stamp"
    path.write_text("created yesterday\nversion 1.0.0")
    assert latest_wasm_pack_version(path) is None


def test_old_stamp_fetches_and_rewrites(tmp_path):
    path = tmp_path / "tool.stamp"
    write_stamp_file(path, datetime.now().astimezone() - timedelta(hours=48), "0.1.0")
    with mock.patch(
        "urllib.request.urlopen",
        return_value=_response({"crate": {"max_version": "0.10.0"}}),
    ):
        assert latest_wasm_pack_version(path) == "0.10.0"
    assert stamp_file_value(path.read_text(), "version") == "0.10.0"


def test_missing_stamp_fetches(tmp_path):
    path = tmp_path / "tool.stamp"
    with mock.patch(
        "urllib.request.urlopen",
        return_value=_response({"crate": {"max_version": "2.0.0"}}),
    ):
        assert latest_wasm_pack_version(path) == "2.0.0"
    assert path.exists()


def test_http_error_raises_and_stamps_time(tmp_path):
    path = tmp_path / "tool.stamp"
    error = urllib.error.HTTPError(
        "https://crates.io/api/v1/crates/wasm-pack", 500, "boom", {}, io.BytesIO(b"")
    )
    with mock.patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(VersionCheckError, match=r"\(500\)"):
            latest_wasm_pack_version(path)
    contents = path.read_text()
    assert stamp_file_value(contents, "created") is not None
    assert stamp_file_value(contents, "version") is None


def test_fetch_bad_status():
    with mock.patch("urllib.request.urlopen", return_value=_response({}, status=404)):
        with pytest.raises(VersionCheckError, match="bad HTTP status code"):
            fetch_latest_version()