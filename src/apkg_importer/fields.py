"""Codec for the separator-delimited field blob stored in notes.flds."""

FIELD_SEPARATOR = "\x1f"


def split_fields(blob: str) -> list[str]:
    """Split a note's field blob into its ordered field values."""
    return blob.split(FIELD_SEPARATOR)


def join_fields(values: list[str]) -> str:
    """Join field values back into a blob. Inverse of split_fields."""
    return FIELD_SEPARATOR.join(values)
