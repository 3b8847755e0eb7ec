"""
DOMCP - Domain model context for coding assistants.

Keeps a structured architectural description of a project (bounded
contexts, entities, services, events, rules), serves it over the Model
Context Protocol, and turns model edits into refactoring plans.
"""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import DomcpError, ModelValidationError, StoreError, ToolError


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("domcp")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "DomcpError",
    "ModelValidationError",
    "StoreError",
    "ToolError",
]
