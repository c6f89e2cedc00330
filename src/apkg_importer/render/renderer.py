"""Turn cards, notes, models and media into display-ready front/back markup."""

import logging
from typing import Mapping, Optional

from ..config import ImportConfig
from ..fields import split_fields
from ..models import Card, CardTemplate, ImportStats, Note, NoteModel, RenderedCard, RenderPath
from .heuristics import pick_front_back
from .template import extract_audio_refs, render_template, resolve_media, resolve_media_sources

logger = logging.getLogger(__name__)


def field_values_by_name(model: NoteModel, values: list[str]) -> dict[str, str]:
    """
    Pair the model's declared field names with the note's values.

    Values are trimmed; names without a value map to "", values without a
    name are ignored.
    """
    return {
        name: (values[i] if i < len(values) else "").strip()
        for i, name in enumerate(model.field_names)
    }


class CardRenderer:
    """Render cards with their model's template, or with the fallback heuristic."""

    def __init__(
        self,
        models: Mapping[str, NoteModel],
        media: Optional[Mapping[str, str]] = None,
        config: Optional[ImportConfig] = None,
    ):
        """
        Initialize the renderer.

        Args:
            models: Decoded models keyed by string model id
            media: Filename -> addressable reference lookup
            config: Import configuration
        """
        self.models = models
        self.media = media or {}
        self.config = config or ImportConfig()

    def find_template(self, note: Note, card: Card) -> Optional[tuple[NoteModel, CardTemplate]]:
        """Get the note's model and the card's template, if both exist."""
        model = self.models.get(str(note.model_id))
        if model is None:
            return None
        template = model.template_at(card.template_ordinal)
        if template is None:
            return None
        return model, template

    def render(self, card: Card, note: Note) -> RenderedCard:
        """Render a single card against its parent note."""
        values = split_fields(note.field_blob)
        audio_refs = extract_audio_refs(values, self.media)

        found = self.find_template(note, card)
        if found is not None:
            model, template = found
            by_name = field_values_by_name(model, values)
            front_html = resolve_media(
                render_template(template.question_format, by_name), self.media, self.config.audio_snippet
            )
            back_html = resolve_media(
                render_template(template.answer_format, by_name), self.media, self.config.audio_snippet
            )
            path = RenderPath.TEMPLATE
        else:
            front_idx, back_idx = pick_front_back(values, self.config)
            front_html = resolve_media_sources(self._value_at(values, front_idx), self.media)
            back_html = resolve_media_sources(self._value_at(values, back_idx), self.media)
            path = RenderPath.FALLBACK

        return RenderedCard(
            card_id=card.id,
            note_id=note.id,
            deck_id=card.deck_id,
            template_ordinal=card.template_ordinal,
            fields=values,
            front_html=front_html,
            back_html=back_html,
            audio_refs=audio_refs,
            tags=note.tag_list,
            render_path=path,
        )

    @staticmethod
    def _value_at(values: list[str], index: int) -> str:
        return values[index] if 0 <= index < len(values) else ""

    def render_all(
        self,
        cards: list[Card],
        notes: list[Note],
        stats: Optional[ImportStats] = None,
    ) -> list[RenderedCard]:
        """
        Render every card whose note exists, in card order.

        Cards pointing at a missing note are dropped.

        Args:
            cards: Card rows
            notes: Note rows
            stats: Optional stats object updated with render counts

        Returns:
            Rendered cards
        """
        notes_by_id = {note.id: note for note in notes}
        rendered: list[RenderedCard] = []
        orphaned = 0

        for card in cards:
            note = notes_by_id.get(card.note_id)
            if note is None:
                logger.debug("Dropping card %d: note %d not found", card.id, card.note_id)
                orphaned += 1
                continue
            rendered.append(self.render(card, note))

        if stats is not None:
            stats.rendered += len(rendered)
            stats.orphaned += orphaned
            stats.fallback_rendered += sum(1 for c in rendered if c.render_path == RenderPath.FALLBACK)

        return rendered
