"""Import an Anki .apkg package into renderable cards and a media catalog."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .archive import COLLECTION_ENTRY, MEDIA_MANIFEST_ENTRY, open_archive
from .config import ImportConfig
from .database import open_collection
from .errors import InvalidArchiveError
from .media import MediaCatalog
from .models import ImportStats, MediaEntry, RenderedCard
from .render import CardRenderer
from .schema import decode_models

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """
    Output of one import.

    The media references in cards and media entries point into the
    catalog's session directory and stay valid until release() is called.
    """

    cards: list[RenderedCard]
    media: list[MediaEntry]
    stats: ImportStats
    catalog: MediaCatalog = field(repr=False)

    def release(self) -> None:
        """Release the media session. References become invalid."""
        self.catalog.release()

    def __enter__(self) -> "ImportResult":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def summary(self) -> dict:
        """Get a summary of the import."""
        return {
            "cards": len(self.cards),
            "card_rows": self.stats.card_rows,
            "notes": self.stats.notes,
            "models": self.stats.models,
            "orphaned_cards": self.stats.orphaned,
            "fallback_cards": self.stats.fallback_rendered,
            "media": len(self.media),
            "media_missing": self.stats.media_missing,
        }


def import_package(data: bytes, config: Optional[ImportConfig] = None) -> ImportResult:
    """
    Import a package from its bytes.

    Args:
        data: Contents of an .apkg file
        config: Import configuration

    Returns:
        ImportResult with rendered cards and extracted media

    Raises:
        InvalidArchiveError: If the container is unreadable or has no collection
        CorruptDatabaseError: If the collection database is unreadable
    """
    config = config or ImportConfig()
    stats = ImportStats()

    with open_archive(data) as archive:
        if not archive.has_entry(COLLECTION_ENTRY):
            raise InvalidArchiveError(f"Package has no '{COLLECTION_ENTRY}' entry")

        manifest_json = None
        if archive.has_entry(MEDIA_MANIFEST_ENTRY):
            manifest_json = archive.read_text(MEDIA_MANIFEST_ENTRY)

        catalog = MediaCatalog.build(manifest_json, archive, config)
        stats.media_listed = len(catalog.entries) + len(catalog.missing_ids)
        stats.media_missing = len(catalog.missing_ids)

        try:
            image = archive.read_entry(COLLECTION_ENTRY)
            with open_collection(image) as collection:
                notes = collection.notes()
                cards = collection.cards()
                models = decode_models(collection.config().models_json)

                stats.notes = len(notes)
                stats.card_rows = len(cards)
                stats.models = len(models)

                renderer = CardRenderer(models, catalog.lookup, config)
                rendered = renderer.render_all(cards, notes, stats)
        except Exception:
            catalog.release()
            raise

    logger.info(
        "Imported %d of %d cards (%d fallback, %d orphaned), %d media files",
        stats.rendered,
        stats.card_rows,
        stats.fallback_rendered,
        stats.orphaned,
        len(catalog.entries),
    )
    return ImportResult(cards=rendered, media=list(catalog.entries), stats=stats, catalog=catalog)


def import_package_file(file_path: str | Path, config: Optional[ImportConfig] = None) -> ImportResult:
    """
    Read an .apkg file from disk and import it.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Package file not found: {file_path}")

    logger.debug("Reading package %s", file_path)
    return import_package(file_path.read_bytes(), config)
