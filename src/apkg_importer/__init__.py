"""APKG Importer - Read Anki packages into renderable cards."""

__version__ = "0.1.0"

from .config import ImportConfig
from .errors import (
    CorruptDatabaseError,
    EntryNotFoundError,
    InvalidArchiveError,
    PackageImportError,
    SchemaParseError,
)
from .fields import FIELD_SEPARATOR, join_fields, split_fields
from .importer import ImportResult, import_package, import_package_file
from .media import MediaCatalog
from .models import (
    Card,
    CardTemplate,
    FieldDefinition,
    ImportStats,
    MediaEntry,
    Note,
    NoteModel,
    RenderedCard,
    RenderPath,
)
from .render import CardRenderer
from .schema import decode_models

__all__ = [
    # Importer
    "import_package",
    "import_package_file",
    "ImportResult",
    "ImportConfig",
    # Components
    "CardRenderer",
    "MediaCatalog",
    "decode_models",
    "split_fields",
    "join_fields",
    "FIELD_SEPARATOR",
    # Errors
    "PackageImportError",
    "InvalidArchiveError",
    "CorruptDatabaseError",
    "EntryNotFoundError",
    "SchemaParseError",
    # Models
    "Card",
    "CardTemplate",
    "FieldDefinition",
    "ImportStats",
    "MediaEntry",
    "Note",
    "NoteModel",
    "RenderedCard",
    "RenderPath",
]
