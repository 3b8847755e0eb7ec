"""
Domain model loading and validation.

Models enter the system from JSON (import files, the store). They are
validated once here, so the differ only ever sees well-formed snapshots.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from . import ir
from .errors import ModelValidationError, make_validation_error

logger = logging.getLogger("domcp.loader")


def validate_model(model: ir.DomainModel, source: Path | None = None) -> None:
    """
    Check the naming invariants of a model.

    Args:
        model: Model to check
        source: Optional file the model came from, used in error messages

    Raises:
        ModelValidationError: If the model, a bounded context or an entity
            has an empty name
    """
    if not model.name:
        raise make_validation_error("Domain model must have a name", source=source)

    for bc in model.bounded_contexts:
        if not bc.name:
            raise make_validation_error("Bounded context must have a name", source=source)
        for entity in bc.entities:
            if not entity.name:
                raise make_validation_error(
                    f"Entity in bounded context '{bc.name}' must have a name",
                    source=source,
                    bounded_context=bc.name,
                )


def parse_model_json(text: str, source: Path | None = None) -> ir.DomainModel:
    """
    Parse and validate a domain model from JSON text.

    Raises:
        ModelValidationError: If the JSON is malformed, does not match the
            schema, or breaks a naming invariant
    """
    try:
        model = ir.DomainModel.model_validate_json(text)
    except PydanticValidationError as e:
        raise make_validation_error(f"Failed to parse domain model JSON: {e}", source=source) from e
    validate_model(model, source=source)
    return model


def load_model_file(path: str | Path) -> ir.DomainModel:
    """
    Load a domain model from a JSON file (used by import).

    Raises:
        ModelValidationError: If the file cannot be read or is not a valid model
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ModelValidationError(f"Failed to read domain model from {path}: {e}") from e

    model = parse_model_json(text, source=path)
    logger.debug("Loaded model '%s' from %s", model.name, path)
    return model


__all__ = [
    "validate_model",
    "parse_model_json",
    "load_model_file",
]
