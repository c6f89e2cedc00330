"""Read named entries from an .apkg ZIP container."""

import io
import logging
import zipfile
import zlib

from ..errors import EntryNotFoundError, InvalidArchiveError

logger = logging.getLogger(__name__)

COLLECTION_ENTRY = "collection.anki2"
MEDIA_MANIFEST_ENTRY = "media"


class ApkgArchive:
    """
    An opened package container.

    The ZIP central directory is read once when the archive is opened, so
    every lookup afterwards is by name.
    """

    def __init__(self, zip_file: zipfile.ZipFile):
        self._zip = zip_file
        self._names = set(zip_file.namelist())

    def names(self) -> list[str]:
        """Entry names in container order."""
        return self._zip.namelist()

    def has_entry(self, name: str) -> bool:
        return name in self._names

    def read_entry(self, name: str) -> bytes:
        """
        Read the raw bytes of an entry.

        Raises:
            EntryNotFoundError: If no entry has this exact name
            InvalidArchiveError: If the entry exists but cannot be decompressed
        """
        if name not in self._names:
            raise EntryNotFoundError(name)
        try:
            return self._zip.read(name)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
            raise InvalidArchiveError(f"Entry '{name}' is unreadable: {e}") from e

    def read_text(self, name: str, encoding: str = "utf-8") -> str:
        """Read an entry and decode it as text."""
        data = self.read_entry(name)
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            raise InvalidArchiveError(f"Entry '{name}' is not valid {encoding} text") from e

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ApkgArchive":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_archive(data: bytes) -> ApkgArchive:
    """
    Open a package from its bytes.

    Args:
        data: The whole .apkg file

    Returns:
        ApkgArchive ready for entry lookups

    Raises:
        InvalidArchiveError: If the bytes are not a ZIP container
    """
    try:
        zip_file = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, ValueError) as e:
        raise InvalidArchiveError(f"Not a ZIP container: {e}") from e

    archive = ApkgArchive(zip_file)
    logger.debug("Opened archive with %d entries", len(archive.names()))
    return archive
