"""Access to the .apkg ZIP container."""

from .reader import COLLECTION_ENTRY, MEDIA_MANIFEST_ENTRY, ApkgArchive, open_archive

__all__ = ["ApkgArchive", "open_archive", "COLLECTION_ENTRY", "MEDIA_MANIFEST_ENTRY"]
