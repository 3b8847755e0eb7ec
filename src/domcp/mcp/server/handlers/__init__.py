"""MCP tool handlers, grouped by what they touch."""

from .model import EDIT_HANDLERS, STORE_HANDLERS
from .query import READ_HANDLERS

__all__ = ["EDIT_HANDLERS", "READ_HANDLERS", "STORE_HANDLERS"]
