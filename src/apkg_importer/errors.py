"""Exceptions raised while importing an Anki package."""


class PackageImportError(Exception):
    """Base class for errors that abort a whole import."""

    user_message = "could not import the package"


class InvalidArchiveError(PackageImportError):
    """The container cannot be opened or lacks the collection database."""

    user_message = "could not read the archive"


class CorruptDatabaseError(PackageImportError):
    """The embedded collection cannot be parsed or is missing tables."""

    user_message = "file is not a valid package"


class EntryNotFoundError(KeyError):
    """A named entry is absent from the archive."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"archive has no entry named '{self.name}'"


class SchemaParseError(ValueError):
    """The models JSON stored in the collection is malformed."""
    pass
