"""Read notes, cards and models from the collection.anki2 SQLite image."""

import logging
import sqlite3
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import CorruptDatabaseError
from ..models import Card, CollectionConfig, Note

logger = logging.getLogger(__name__)

NOTES_QUERY = "SELECT id, mid, flds, tags FROM notes"
CARDS_QUERY = "SELECT id, nid, did, ord, type, queue, ivl, due, factor FROM cards"
CONFIG_QUERY = "SELECT models FROM col"


def decode_text(value: bytes) -> str:
    """Decode a TEXT value, replacing invalid UTF-8 instead of failing."""
    return value.decode("utf-8", errors="replace")


def note_from_row(row: sqlite3.Row) -> Note:
    """Decode a notes row by column name."""
    return Note(
        id=row["id"],
        model_id=row["mid"],
        field_blob=row["flds"],
        tags=row["tags"] or "",
    )


def card_from_row(row: sqlite3.Row) -> Card:
    """Decode a cards row by column name."""
    return Card(
        id=row["id"],
        note_id=row["nid"],
        deck_id=row["did"],
        template_ordinal=row["ord"],
        type=row["type"],
        queue=row["queue"],
        interval=row["ivl"],
        due=row["due"],
        factor=row["factor"],
    )


class CollectionReader:
    """
    Scoped access to an embedded collection database.

    The image is written to a private temporary directory for the lifetime
    of the reader. Use as a context manager so the connection and the
    directory are released on every exit path.
    """

    DB_FILENAME = "collection.anki2"

    def __init__(self, image: bytes):
        """
        Initialize the reader.

        Args:
            image: Raw bytes of the SQLite database
        """
        self._image = image
        self._tmpdir: Optional[tempfile.TemporaryDirectory] = None
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "CollectionReader":
        """
        Open the database and check that it is readable.

        Raises:
            CorruptDatabaseError: If the image is not a SQLite database
        """
        self._tmpdir = tempfile.TemporaryDirectory(prefix="apkg-collection-")
        db_path = Path(self._tmpdir.name) / self.DB_FILENAME
        db_path.write_bytes(self._image)

        try:
            self._conn = sqlite3.connect(str(db_path))
            self._conn.row_factory = sqlite3.Row
            # A stray invalid byte in one note must not fail the whole query
            self._conn.text_factory = decode_text
            # Forces the header to be parsed; garbage fails here rather than mid-import
            self._conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.DatabaseError as e:
            self.close()
            raise CorruptDatabaseError(f"Collection database is unreadable: {e}") from e

        logger.debug("Opened collection database (%d bytes)", len(self._image))
        return self

    def close(self) -> None:
        """Close the connection and remove the temporary copy. Safe to call twice."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        if self._tmpdir is not None:
            self._tmpdir.cleanup()
            self._tmpdir = None

    def __enter__(self) -> "CollectionReader":
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _query(self, sql: str) -> list[sqlite3.Row]:
        if self._conn is None:
            raise CorruptDatabaseError("Collection database is not open")
        try:
            return self._conn.execute(sql).fetchall()
        except sqlite3.DatabaseError as e:
            raise CorruptDatabaseError(f"Query failed ({sql}): {e}") from e

    def notes(self) -> list[Note]:
        """Read every note. Rows that cannot be decoded are skipped."""
        notes: list[Note] = []
        for row in self._query(NOTES_QUERY):
            try:
                notes.append(note_from_row(row))
            except ValidationError as e:
                logger.warning("Skipping malformed note row %r: %s", row["id"], e)
        return notes

    def cards(self) -> list[Card]:
        """Read every card. Rows that cannot be decoded are skipped."""
        cards: list[Card] = []
        for row in self._query(CARDS_QUERY):
            try:
                cards.append(card_from_row(row))
            except ValidationError as e:
                logger.warning("Skipping malformed card row %r: %s", row["id"], e)
        return cards

    def config(self) -> CollectionConfig:
        """Read the models JSON from the first col row ("{}" if there is none)."""
        rows = self._query(CONFIG_QUERY)
        if not rows or rows[0]["models"] is None:
            return CollectionConfig(models_json="{}")

        models = rows[0]["models"]
        if isinstance(models, bytes):
            models = models.decode("utf-8", errors="replace")
        return CollectionConfig(models_json=models)


def open_collection(image: bytes) -> CollectionReader:
    """Open a collection image. Close it (or use it in a with block) when done."""
    return CollectionReader(image).open()
