"""Media catalog for imported packages."""

from .catalog import MediaCatalog, parse_manifest

__all__ = ["MediaCatalog", "parse_manifest"]
