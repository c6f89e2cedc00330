"""Data models for the package import pipeline."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .fields import split_fields


class RenderPath(str, Enum):
    """Which rendering path produced a card."""

    TEMPLATE = "template"
    FALLBACK = "fallback"


class Note(BaseModel):
    """A row of the notes table."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: int
    model_id: int = Field(description="Id of the note's model (notes.mid)")
    field_blob: str = Field(description="Field values joined by the 0x1f separator (notes.flds)")
    tags: str = Field(default="", description="Space-separated tags")

    @property
    def fields(self) -> list[str]:
        return split_fields(self.field_blob)

    @property
    def tag_list(self) -> list[str]:
        return self.tags.split()


class Card(BaseModel):
    """A row of the cards table. Scheduling columns are carried, not interpreted."""

    model_config = ConfigDict(frozen=True)

    id: int
    note_id: int = Field(description="cards.nid")
    deck_id: int = Field(description="cards.did")
    template_ordinal: int = Field(description="cards.ord, index into the model's templates")
    type: int = 0
    queue: int = 0
    interval: int = Field(default=0, description="cards.ivl")
    due: int = 0
    factor: int = 0

    @field_validator("type", "queue", "interval", "due", "factor", mode="before")
    @classmethod
    def _null_as_zero(cls, value):
        return 0 if value is None else value


class CollectionConfig(BaseModel):
    """The scalar config row of the col table."""

    model_config = ConfigDict(frozen=True)

    models_json: str = "{}"


class FieldDefinition(BaseModel):
    """One entry of a model's flds list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    ordinal: Optional[int] = Field(default=None, alias="ord")


class CardTemplate(BaseModel):
    """One entry of a model's tmpls list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    question_format: str = Field(default="", alias="qfmt")
    answer_format: str = Field(default="", alias="afmt")
    ordinal: Optional[int] = Field(default=None, alias="ord")

    @field_validator("name", "question_format", "answer_format", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class NoteModel(BaseModel):
    """A note type: ordered field names plus ordered card templates."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Model id as it is keyed in col.models")
    name: str = ""
    fields: list[FieldDefinition] = Field(default_factory=list, alias="flds")
    templates: list[CardTemplate] = Field(default_factory=list, alias="tmpls")

    @field_validator("fields", "templates", mode="before")
    @classmethod
    def _null_as_empty_list(cls, value):
        return [] if value is None else value

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, value):
        return "" if value is None else value

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def template_at(self, ordinal: int) -> Optional[CardTemplate]:
        """Get the template for a card ordinal, if the model has one."""
        if 0 <= ordinal < len(self.templates):
            return self.templates[ordinal]
        return None


class MediaEntry(BaseModel):
    """A media file extracted from the package."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Numeric entry name inside the archive")
    filename: str = Field(description="Real filename, as referenced from note fields")
    payload: bytes = Field(repr=False)
    ref: str = Field(description="Session-scoped addressable reference (file:// URI)")


class RenderedCard(BaseModel):
    """A card ready for display."""

    model_config = ConfigDict(frozen=True)

    card_id: int
    note_id: int
    deck_id: int
    template_ordinal: int
    fields: list[str] = Field(description="All original field values, unmodified")
    front_html: str
    back_html: str
    audio_refs: list[str] = Field(default_factory=list, description="Every resolved [sound:] in the note")
    tags: list[str] = Field(default_factory=list)
    render_path: RenderPath


class ImportStats(BaseModel):
    """Counts gathered during one import, including silent degradations."""

    card_rows: int = 0
    notes: int = 0
    models: int = 0
    rendered: int = 0
    orphaned: int = 0
    fallback_rendered: int = 0
    media_listed: int = 0
    media_missing: int = 0
