"""
Error types for DOMCP model loading, persistence and tool dispatch.

The differencing and planning core never raises; everything here belongs to
the collaborators around it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class DomcpError(Exception):
    """Base exception for all DOMCP errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class ModelValidationError(DomcpError):
    """
    Raised when a domain model is rejected at load or import time.

    Examples:
    - Model without a name
    - Bounded context without a name
    - Entity without a name
    - JSON that is malformed or does not match the schema
    """

    pass


class StoreError(DomcpError):
    """
    Raised when the model store cannot complete an operation.

    Examples:
    - Database file cannot be created or opened
    - Stored model JSON is corrupted
    - Export target cannot be written
    """

    pass


class ToolError(DomcpError):
    """
    Raised when a tool call cannot be applied to the model.

    Examples:
    - Unknown bounded context
    - Entity to remove does not exist
    - Missing required argument
    """

    pass


@dataclass
class ErrorContext:
    """
    Where in a model (or model file) an error was found.

    Attributes:
        source: Optional path of the JSON file being loaded
        bounded_context: Optional bounded context name
        entity: Optional entity name
    """

    source: Path | None = None
    bounded_context: str | None = None
    entity: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "model.json in context 'Identity'"
        """
        parts = []
        if self.source:
            parts.append(str(self.source))
        if self.bounded_context:
            parts.append(f"in context '{self.bounded_context}'")
        if self.entity:
            parts.append(f"at entity '{self.entity}'")
        return " ".join(parts) or "<model>"


def make_validation_error(
    message: str,
    source: Path | None = None,
    bounded_context: str | None = None,
) -> ModelValidationError:
    """
    Helper to create a ModelValidationError with optional context.

    Args:
        message: Error description
        source: Optional file the model was read from
        bounded_context: Optional context where the problem sits

    Returns:
        ModelValidationError with context if any location was provided
    """
    if source or bounded_context:
        return ModelValidationError(
            message, ErrorContext(source=source, bounded_context=bounded_context)
        )
    return ModelValidationError(message)


__all__ = [
    "DomcpError",
    "ModelValidationError",
    "StoreError",
    "ToolError",
    "ErrorContext",
    "make_validation_error",
]
