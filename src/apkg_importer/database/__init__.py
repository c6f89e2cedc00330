"""Embedded collection database access."""

from .collection import CollectionReader, open_collection

__all__ = ["CollectionReader", "open_collection"]
