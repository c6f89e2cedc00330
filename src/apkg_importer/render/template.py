"""Minimal card template language and media reference resolution."""

import re
from typing import Mapping

from ..config import DEFAULT_AUDIO_SNIPPET

# {{Name}} and {{type:Name}}; the name may be padded with whitespace
PLACEHOLDER = re.compile(r"\{\{\s*(type:)?\s*([^{}]+?)\s*\}\}")
SRC_ATTRIBUTE = re.compile(r"(src)=[\"']([^\"']+)[\"']")
SOUND_TAG = re.compile(r"\[sound:([^\]]+)\]")


def render_template(template: str, values: Mapping[str, str]) -> str:
    """
    Substitute field placeholders in a question/answer format.

    {{Name}} and {{type:Name}} become the field's value, or "" when the note
    has no such field. Other prefixed forms such as {{cloze:Text}} are left
    untouched. Substitution is a single pass, so field values are never
    themselves expanded.
    """
    if not template:
        return ""

    def substitute(match: re.Match) -> str:
        is_type, name = match.group(1), match.group(2)
        if not is_type and ":" in name:
            return match.group(0)
        return values.get(name, "")

    return PLACEHOLDER.sub(substitute, template)


def resolve_media_sources(html: str, media: Mapping[str, str]) -> str:
    """Point src="file" / src='file' attributes at their session references."""
    if not html:
        return html

    def substitute(match: re.Match) -> str:
        url = media.get(match.group(2))
        return f'{match.group(1)}="{url}"' if url else match.group(0)

    return SRC_ATTRIBUTE.sub(substitute, html)


def resolve_sound_tags(html: str, media: Mapping[str, str], snippet: str = DEFAULT_AUDIO_SNIPPET) -> str:
    """Replace [sound:file] with an audio player for known files."""
    if not html:
        return html

    def substitute(match: re.Match) -> str:
        url = media.get(match.group(1))
        return snippet.replace("{url}", url) if url else match.group(0)

    return SOUND_TAG.sub(substitute, html)


def resolve_media(html: str, media: Mapping[str, str], snippet: str = DEFAULT_AUDIO_SNIPPET) -> str:
    """Resolve src attributes, then sound tags. Unknown files stay as written."""
    return resolve_sound_tags(resolve_media_sources(html, media), media, snippet)


def extract_audio_refs(field_values: list[str], media: Mapping[str, str]) -> list[str]:
    """
    Collect references for every [sound:] tag in every field, in order.

    Tags naming files that are not in the catalog are skipped.
    """
    refs: list[str] = []
    for value in field_values:
        for filename in SOUND_TAG.findall(value):
            url = media.get(filename)
            if url:
                refs.append(url)
    return refs
