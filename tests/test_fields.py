"""Tests for the field blob codec."""

import pytest

from apkg_importer.fields import FIELD_SEPARATOR, join_fields, split_fields
from apkg_importer.models import Note


def test_split_fields():
    """Test splitting on the 0x1f separator."""
    assert split_fields("Hola\x1fHello") == ["Hola", "Hello"]


def test_split_single_field():
    """A blob without separators is one field."""
    assert split_fields("Only") == ["Only"]


def test_split_keeps_empty_fields():
    """Empty values between separators are preserved."""
    assert split_fields("\x1fB\x1f") == ["", "B", ""]


def test_join_fields():
    """Test joining values back into a blob."""
    assert join_fields(["Front", "Back", "Extra"]) == "Front\x1fBack\x1fExtra"


@pytest.mark.parametrize(
    "blob",
    [
        "",
        "Hola\x1fHello",
        "\x1f\x1f",
        "  spaced \x1f<b>html</b>\x1f[sound:a.mp3]",
        "tab\tand\nnewline\x1fcañón",
    ],
)
def test_split_join_round_trip(blob):
    """Splitting then joining reproduces the blob exactly."""
    assert join_fields(split_fields(blob)) == blob


def test_separator_is_unit_separator():
    assert FIELD_SEPARATOR == "\x1f"


def test_note_fields_property():
    """Note.fields splits the stored blob."""
    note = Note(id=1, model_id=2, field_blob="A\x1fB", tags=" vocab  spanish ")
    assert note.fields == ["A", "B"]
    assert note.tag_list == ["vocab", "spanish"]
