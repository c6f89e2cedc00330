"""Tests for the archive reader."""

import pytest

from apkg_importer.archive import open_archive
from apkg_importer.errors import EntryNotFoundError, InvalidArchiveError

from apkg_factory import create_package


class TestOpenArchive:
    """Test opening containers."""

    def test_not_a_zip(self):
        with pytest.raises(InvalidArchiveError):
            open_archive(b"definitely not a zip file")

    def test_empty_bytes(self):
        with pytest.raises(InvalidArchiveError):
            open_archive(b"")

    def test_lists_entries(self):
        data = create_package(b"db", manifest={"0": "a.mp3"}, media={"0": b"ID3"})
        with open_archive(data) as archive:
            assert archive.names() == ["collection.anki2", "media", "0"]
            assert archive.has_entry("media")
            assert not archive.has_entry("1")


class TestReadEntry:
    """Test entry lookup."""

    def test_read_binary_entry(self):
        data = create_package(b"\x00\x01binary", media={"7": b"\xff\xfe"})
        with open_archive(data) as archive:
            assert archive.read_entry("collection.anki2") == b"\x00\x01binary"
            assert archive.read_entry("7") == b"\xff\xfe"

    def test_read_text_entry(self):
        data = create_package(b"db", raw_manifest='{"0": "canción.mp3"}')
        with open_archive(data) as archive:
            assert archive.read_text("media") == '{"0": "canción.mp3"}'

    def test_missing_entry(self):
        data = create_package(b"db")
        with open_archive(data) as archive:
            with pytest.raises(EntryNotFoundError) as exc_info:
                archive.read_entry("3")
        assert exc_info.value.name == "3"
        assert "3" in str(exc_info.value)

    def test_missing_entry_is_key_error(self):
        data = create_package(b"db")
        with open_archive(data) as archive:
            with pytest.raises(KeyError):
                archive.read_entry("media")

    def test_invalid_utf8_text(self):
        data = create_package(b"db", media={"media": b"\xff\xfe\xfa"})
        with open_archive(data) as archive:
            with pytest.raises(InvalidArchiveError):
                archive.read_text("media")
