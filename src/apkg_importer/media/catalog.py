"""Map the package's numbered media entries to real filenames and session references."""

import json
import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from ..archive import ApkgArchive
from ..config import ImportConfig
from ..errors import EntryNotFoundError, InvalidArchiveError
from ..models import MediaEntry

logger = logging.getLogger(__name__)

SAFE_SUFFIX = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
NUMERIC_ID = re.compile(r"^(0|[1-9][0-9]*)$")


def manifest_order(media_id: str) -> tuple[int, int]:
    """Sort key: numeric ids ascending, then any other ids in document order."""
    if NUMERIC_ID.match(media_id):
        return (0, int(media_id))
    return (1, 0)


def parse_manifest(manifest_json: Optional[str]) -> dict[str, str]:
    """
    Parse the media manifest (numeric id -> filename).

    Args:
        manifest_json: Text of the archive's "media" entry, or None if absent

    Returns:
        Mapping ordered by numeric id; empty if there is no manifest

    Raises:
        InvalidArchiveError: If the manifest is not a JSON object
    """
    if manifest_json is None or not manifest_json.strip():
        return {}

    try:
        data = json.loads(manifest_json)
    except json.JSONDecodeError as e:
        raise InvalidArchiveError(f"Media manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidArchiveError("Media manifest is not a JSON object")

    manifest: dict[str, str] = {}
    for media_id, filename in sorted(data.items(), key=lambda item: manifest_order(item[0])):
        if not isinstance(filename, str):
            logger.warning("Ignoring manifest entry %r with non-string filename", media_id)
            continue
        manifest[str(media_id)] = filename
    return manifest


def disk_name(position: int, filename: str) -> str:
    """Name for a materialized payload. Never derived from the untrusted filename body."""
    suffix = Path(filename).suffix
    if not SAFE_SUFFIX.match(suffix):
        suffix = ""
    return f"{position:05d}{suffix}"


class MediaCatalog:
    """
    Media extracted from one package, plus the session directory that backs
    each entry's addressable reference.

    References stay valid until release() is called. The caller owns that
    call; the catalog never releases on its own.
    """

    def __init__(self, config: Optional[ImportConfig] = None):
        """
        Initialize an empty catalog with its own session directory.

        Args:
            config: Import configuration (media_root picks the parent directory)
        """
        self.config = config or ImportConfig()
        root = str(self.config.media_root) if self.config.media_root else None
        if root:
            Path(root).mkdir(parents=True, exist_ok=True)
        self.session_dir = Path(tempfile.mkdtemp(prefix="apkg-media-", dir=root)).resolve()
        self.entries: list[MediaEntry] = []
        self.missing_ids: list[str] = []
        self._by_filename: dict[str, str] = {}
        self.released = False

    @classmethod
    def build(
        cls,
        manifest_json: Optional[str],
        archive: ApkgArchive,
        config: Optional[ImportConfig] = None,
    ) -> "MediaCatalog":
        """
        Build a catalog from the manifest and the archive's numbered entries.

        Ids listed in the manifest but absent from the archive are skipped.

        Raises:
            InvalidArchiveError: If the manifest is malformed
        """
        manifest = parse_manifest(manifest_json)
        catalog = cls(config)
        try:
            for media_id, filename in manifest.items():
                try:
                    payload = archive.read_entry(media_id)
                except EntryNotFoundError:
                    logger.debug("Media %s (%s) listed but not in archive", media_id, filename)
                    catalog.missing_ids.append(media_id)
                    continue
                catalog.add(media_id, filename, payload)
        except Exception:
            catalog.release()
            raise

        logger.debug(
            "Media catalog: %d entries, %d missing", len(catalog.entries), len(catalog.missing_ids)
        )
        return catalog

    def add(self, media_id: str, filename: str, payload: bytes) -> MediaEntry:
        """Materialize a payload in the session directory and register it."""
        if self.released:
            raise RuntimeError("Media catalog has been released")

        path = self.session_dir / disk_name(len(self.entries), filename)
        path.write_bytes(payload)
        entry = MediaEntry(id=media_id, filename=filename, payload=payload, ref=path.as_uri())
        self.entries.append(entry)
        self._by_filename[filename] = entry.ref
        return entry

    def resolve(self, filename: str) -> Optional[str]:
        """Get the reference for a filename. Exact, case-sensitive match only."""
        return self._by_filename.get(filename)

    @property
    def lookup(self) -> dict[str, str]:
        """Copy of the filename -> reference mapping."""
        return dict(self._by_filename)

    def release(self) -> None:
        """Delete the session directory. All references become invalid."""
        if self.released:
            return
        shutil.rmtree(self.session_dir, ignore_errors=True)
        self._by_filename.clear()
        self.released = True

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, filename: object) -> bool:
        return filename in self._by_filename

    def __enter__(self) -> "MediaCatalog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()
