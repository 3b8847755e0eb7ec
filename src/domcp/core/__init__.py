"""Core DOMCP functionality: IR, validation, differencing, planning, editing and storage."""

from . import ir
from .changes import diff_models, reconcile_named
from .errors import (
    DomcpError,
    ErrorContext,
    ModelValidationError,
    StoreError,
    ToolError,
)
from .loader import load_model_file, parse_model_json, validate_model
from .paths import resolve_path
from .planner import plan_refactoring
from .registry import DomainRegistry
from .store import ModelRepository, ModelStore, ProjectInfo, canonicalize_workspace
from .strings import to_snake

__all__ = [
    "ir",
    "DomcpError",
    "ModelValidationError",
    "StoreError",
    "ToolError",
    "ErrorContext",
    "diff_models",
    "reconcile_named",
    "plan_refactoring",
    "resolve_path",
    "to_snake",
    "validate_model",
    "parse_model_json",
    "load_model_file",
    "DomainRegistry",
    "ModelRepository",
    "ModelStore",
    "ProjectInfo",
    "canonicalize_workspace",
]
