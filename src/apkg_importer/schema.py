"""Decode the note models stored as JSON in col.models."""

import json
import logging

from pydantic import ValidationError

from .errors import SchemaParseError
from .models import NoteModel

logger = logging.getLogger(__name__)


def parse_models_json(models_json: str) -> dict[str, dict]:
    """
    Parse col.models into raw model dicts keyed by model id.

    Raises:
        SchemaParseError: If the text is not a JSON object
    """
    try:
        data = json.loads(models_json or "{}")
    except json.JSONDecodeError as e:
        raise SchemaParseError(f"Models JSON is malformed: {e}") from e

    if not isinstance(data, dict):
        raise SchemaParseError(f"Models JSON is a {type(data).__name__}, expected an object")
    return data


def decode_models(models_json: str) -> dict[str, NoteModel]:
    """
    Decode every model, keyed by its string id.

    A malformed document yields an empty mapping and a malformed model is
    left out; cards that need either are rendered by the fallback heuristic.
    """
    try:
        raw_models = parse_models_json(models_json)
    except SchemaParseError as e:
        logger.warning("%s; rendering every card with the fallback", e)
        return {}

    models: dict[str, NoteModel] = {}
    for model_id, raw in raw_models.items():
        if not isinstance(raw, dict):
            logger.warning("Model %s is not an object, skipping", model_id)
            continue
        try:
            models[str(model_id)] = NoteModel.model_validate({**raw, "id": str(model_id)})
        except ValidationError as e:
            logger.warning("Model %s is malformed, skipping: %s", model_id, e)
    return models
