"""Test writing .apkg archives."""

import json
import zipfile

import pytest

from knowviz.core.errors import PackagingError
from knowviz.core.package import pack


def test_pack_layout(tmp_path):
    output = pack(
        b"db-bytes",
        {"0": b"\x00\x00\x00", "1": b"png"},
        {"0": "image-0.png", "1": "image-1.png"},
        tmp_path / "deck.apkg",
    )

    with zipfile.ZipFile(output) as zip_file:
        assert zip_file.namelist() == ["collection.anki2", "0", "1", "media"]
        assert zip_file.read("collection.anki2") == b"db-bytes"
        assert zip_file.read("0") == b"\x00\x00\x00"
        assert json.loads(zip_file.read("media")) == {"0": "image-0.png", "1": "image-1.png"}
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zip_file.infolist())
        assert zip_file.testzip() is None


def test_manifest_is_written_when_empty(tmp_path):
    output = pack(b"db", {}, {}, tmp_path / "deck.apkg")

    with zipfile.ZipFile(output) as zip_file:
        assert zip_file.read("media") == b"{}"


def test_mismatched_manifest_is_refused(tmp_path):
    with pytest.raises(PackagingError):
        pack(b"db", {"0": b"x"}, {}, tmp_path / "deck.apkg")

    assert not (tmp_path / "deck.apkg").exists()


def test_unwritable_output_raises(tmp_path):
    with pytest.raises(PackagingError):
        pack(b"db", {}, {}, tmp_path / "missing" / "deck.apkg")
