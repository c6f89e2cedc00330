"""Card rendering."""

from .heuristics import pick_front_back
from .renderer import CardRenderer
from .template import extract_audio_refs, render_template, resolve_media, resolve_media_sources

__all__ = [
    "CardRenderer",
    "pick_front_back",
    "render_template",
    "resolve_media",
    "resolve_media_sources",
    "extract_audio_refs",
]
