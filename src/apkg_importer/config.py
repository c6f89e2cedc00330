"""Configuration for the package import pipeline."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_AUDIO_SNIPPET = '<audio controls preload="none" src="{url}"></audio>'


class ImportConfig(BaseModel):
    """Tunables for card rendering and media handling."""

    front_max_length: int = Field(
        default=60, ge=1, description="Longest trimmed field the fallback picks as a front"
    )
    accent_characters: str = Field(
        default="áéíóúñ",
        description="Characters that mark a field as a likely back in the fallback (case-insensitive)",
    )
    audio_snippet: str = Field(
        default=DEFAULT_AUDIO_SNIPPET,
        description="Markup that replaces [sound:...] tags; {url} is the resolved reference",
    )
    media_root: Optional[Path] = Field(
        default=None, description="Parent directory for session media (system temp dir if unset)"
    )
