"""
MCP Server state management.

The server works on one live domain model for one workspace at a time.
Write tools mutate the model in place; ``save_model`` persists it through
the store.
"""

from __future__ import annotations

import logging

from domcp.core import ir
from domcp.core.errors import ToolError
from domcp.core.store import ModelRepository

logger = logging.getLogger("domcp.mcp")

# ============================================================================
# Server State
# ============================================================================

_model: ir.DomainModel | None = None
_workspace: str = ""
_store: ModelRepository | None = None


def init_state(model: ir.DomainModel, workspace: str, store: ModelRepository) -> None:
    """Install the live model, its workspace key and the store."""
    global _model, _workspace, _store
    _model = model
    _workspace = workspace
    _store = store
    logger.debug("Server state initialized for %s", workspace)


def reset_state() -> None:
    global _model, _workspace, _store
    _model = None
    _workspace = ""
    _store = None


def get_model() -> ir.DomainModel:
    """Get the live model."""
    if _model is None:
        raise ToolError("No domain model loaded")
    return _model


def get_workspace() -> str:
    return _workspace


def get_store() -> ModelRepository:
    if _store is None:
        raise ToolError("No model store configured")
    return _store
