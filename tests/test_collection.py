"""Tests for the embedded database reader."""

import sqlite3
import tempfile
from pathlib import Path

import pytest

from apkg_importer.database import CollectionReader, open_collection
from apkg_importer.errors import CorruptDatabaseError

from apkg_factory import create_collection, create_model


def create_partial_collection(sql: str) -> bytes:
    """Helper to create a database with an arbitrary schema."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "partial.db"
        conn = sqlite3.connect(str(db_path))
        conn.executescript(sql)
        conn.commit()
        conn.close()
        return db_path.read_bytes()


class TestCollectionReader:
    """Test reading rows."""

    def test_read_notes(self):
        image = create_collection(notes=[(1, 100, "Hola\x1fHello", "vocab")])
        with open_collection(image) as db:
            notes = db.notes()

        assert len(notes) == 1
        assert notes[0].id == 1
        assert notes[0].model_id == 100
        assert notes[0].field_blob == "Hola\x1fHello"
        assert notes[0].tags == "vocab"

    def test_read_cards(self):
        image = create_collection(notes=[(1, 100, "a", "")], cards=[(10, 1, 2)])
        with open_collection(image) as db:
            cards = db.cards()

        assert len(cards) == 1
        card = cards[0]
        assert card.id == 10
        assert card.note_id == 1
        assert card.deck_id == 1
        assert card.template_ordinal == 2
        assert card.factor == 2500

    def test_read_config(self):
        image = create_collection(models={100: create_model()})
        with open_collection(image) as db:
            config = db.config()
        assert '"100"' in config.models_json

    def test_config_without_row(self):
        """An empty col table reads as an empty models object."""
        image = create_collection(include_col_row=False)
        with open_collection(image) as db:
            assert db.config().models_json == "{}"

    def test_empty_tables(self):
        image = create_collection()
        with open_collection(image) as db:
            assert db.notes() == []
            assert db.cards() == []

    def test_columns_read_by_name(self):
        """Extra columns and a different physical order do not matter."""
        image = create_partial_collection(
            """
            CREATE TABLE col (models text, crt integer);
            CREATE TABLE notes (tags text, guid text, flds text, mid integer, id integer);
            CREATE TABLE cards (
                factor integer, due integer, ivl integer, queue integer, type integer,
                ord integer, did integer, nid integer, id integer, odue integer
            );
            INSERT INTO col VALUES ('{}', 0);
            INSERT INTO notes VALUES ('t', 'g', 'A', 5, 9);
            INSERT INTO cards VALUES (2500, 3, 4, 1, 2, 0, 7, 9, 11, 0);
            """
        )
        with open_collection(image) as db:
            note = db.notes()[0]
            card = db.cards()[0]

        assert (note.id, note.model_id, note.field_blob) == (9, 5, "A")
        assert (card.id, card.note_id, card.deck_id, card.interval, card.due) == (11, 9, 7, 4, 3)

    def test_invalid_utf8_decoded_leniently(self):
        """A note with a bad byte is read with a replacement character."""
        image = create_partial_collection(
            """
            CREATE TABLE notes (id integer, mid integer, flds text, tags text);
            INSERT INTO notes VALUES (1, 100, 'Hola' || char(31) || 'Hello', '');
            INSERT INTO notes VALUES (2, 100, CAST(x'4261641f42ff' AS TEXT), '');
            """
        )
        with open_collection(image) as db:
            notes = db.notes()

        assert [n.id for n in notes] == [1, 2]
        assert notes[1].fields == ["Bad", "B\ufffd"]

    def test_null_scheduling_columns(self):
        """Cards with NULL scheduling values are kept with zeros."""
        image = create_partial_collection(
            """
            CREATE TABLE cards (
                id integer, nid integer, did integer, ord integer, type integer,
                queue integer, ivl integer, due integer, factor integer
            );
            INSERT INTO cards VALUES (10, 1, 1, 0, NULL, NULL, NULL, NULL, NULL);
            """
        )
        with open_collection(image) as db:
            cards = db.cards()

        assert len(cards) == 1
        assert (cards[0].type, cards[0].queue, cards[0].interval, cards[0].due, cards[0].factor) == (0, 0, 0, 0, 0)

    def test_null_note_id_skipped(self):
        image = create_partial_collection(
            """
            CREATE TABLE cards (
                id integer, nid integer, did integer, ord integer, type integer,
                queue integer, ivl integer, due integer, factor integer
            );
            INSERT INTO cards VALUES (10, NULL, 1, 0, 0, 0, 0, 0, 0);
            INSERT INTO cards VALUES (11, 1, 1, 0, 0, 0, 0, 0, 0);
            """
        )
        with open_collection(image) as db:
            assert [c.id for c in db.cards()] == [11]

    def test_closed_after_with_block(self):
        image = create_collection()
        with open_collection(image) as db:
            assert db.is_open
        assert not db.is_open

    def test_close_twice(self):
        db = open_collection(create_collection())
        db.close()
        db.close()
        assert not db.is_open

    def test_context_manager_opens(self):
        with CollectionReader(create_collection()) as db:
            assert db.is_open


class TestCorruptDatabase:
    """Test database-level failures."""

    def test_garbage_image(self):
        with pytest.raises(CorruptDatabaseError):
            open_collection(b"this is not sqlite at all, not even close" * 10)

    def test_missing_cards_table(self):
        image = create_partial_collection(
            "CREATE TABLE notes (id integer, mid integer, flds text, tags text);"
        )
        with open_collection(image) as db:
            assert db.notes() == []
            with pytest.raises(CorruptDatabaseError):
                db.cards()

    def test_missing_col_table(self):
        image = create_partial_collection("CREATE TABLE other (x integer);")
        with open_collection(image) as db:
            with pytest.raises(CorruptDatabaseError):
                db.config()

    def test_closed_after_query_failure(self):
        image = create_partial_collection("CREATE TABLE other (x integer);")
        with pytest.raises(CorruptDatabaseError):
            with open_collection(image) as db:
                db.notes()
        assert not db.is_open

    def test_query_after_close(self):
        db = open_collection(create_collection())
        db.close()
        with pytest.raises(CorruptDatabaseError):
            db.notes()
