"""Guess front and back fields for notes without a usable template."""

import re
from typing import Optional

from ..config import ImportConfig

MEDIA_MARKUP = re.compile(r"<img|<audio|<video|\[sound:", re.IGNORECASE)
TAGS_AND_SOUNDS = re.compile(r"<[^>]+>|\[sound:[^\]]+\]")


def is_media_only(value: str) -> bool:
    """True if the field holds media markup and nothing else."""
    return bool(MEDIA_MARKUP.search(value)) and TAGS_AND_SOUNDS.sub("", value).strip() == ""


def has_accent(value: str, accent_characters: str) -> bool:
    """True if the field contains any accent character (case-insensitive)."""
    accents = set(accent_characters.casefold())
    return any(ch in accents for ch in value.casefold())


def pick_front_back(fields: list[str], config: Optional[ImportConfig] = None) -> tuple[int, int]:
    """
    Pick (front_index, back_index) for a note rendered without a template.

    Front is the first field that is not media-only and whose trimmed text
    is non-empty and at most front_max_length long; index 0 if none is.

    Back is the first other field that is not media-only and either
    contains an accent character or is longer than front_max_length; if
    none is, index 1 when the front is 0, otherwise index 0.
    """
    config = config or ImportConfig()
    limit = config.front_max_length

    front_idx = next(
        (
            i
            for i, value in enumerate(fields)
            if not is_media_only(value) and 0 < len(value.strip()) <= limit
        ),
        -1,
    )
    if front_idx == -1:
        front_idx = 0

    back_idx = next(
        (
            i
            for i, value in enumerate(fields)
            if i != front_idx
            and not is_media_only(value)
            and (has_accent(value, config.accent_characters) or len(value) > limit)
        ),
        -1,
    )
    if back_idx == -1:
        back_idx = 1 if front_idx == 0 else 0

    return front_idx, back_idx
