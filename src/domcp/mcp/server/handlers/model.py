"""
Write tool handlers.

Editing handlers mutate the live model in place. ``compare_model`` and
``draft_refactoring_plan`` diff the live model against the persisted
snapshot (an empty model when the workspace has never been saved), and
``save_model`` persists it.
"""

from __future__ import annotations

import logging
from typing import Any

from domcp.core import editing, ir
from domcp.core.changes import diff_models
from domcp.core.errors import StoreError, ToolError
from domcp.core.planner import plan_refactoring
from domcp.core.store import ModelRepository

from .common import (
    arg_str,
    handler_error_json,
    opt_bool,
    opt_dict_list,
    opt_str,
    opt_str_list,
    to_json,
)

logger = logging.getLogger("domcp.mcp")


def _ok(message: str) -> str:
    return to_json({"status": "ok", "message": message})


# =============================================================================
# Editing
# =============================================================================


@handler_error_json
def update_bounded_context(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return _ok(
        editing.update_bounded_context(
            model,
            arg_str(args, "name"),
            description=opt_str(args, "description"),
            module_path=opt_str(args, "module_path"),
            dependencies=opt_str_list(args, "dependencies"),
        )
    )


@handler_error_json
def update_entity(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return _ok(
        editing.update_entity(
            model,
            arg_str(args, "context"),
            arg_str(args, "name"),
            description=opt_str(args, "description"),
            aggregate_root=opt_bool(args, "aggregate_root"),
            fields=opt_dict_list(args, "fields"),
            methods=opt_dict_list(args, "methods"),
            invariants=opt_str_list(args, "invariants"),
        )
    )


@handler_error_json
def update_service(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return _ok(
        editing.update_service(
            model,
            arg_str(args, "context"),
            arg_str(args, "name"),
            description=opt_str(args, "description"),
            kind=opt_str(args, "kind"),
            methods=opt_dict_list(args, "methods"),
            dependencies=opt_str_list(args, "dependencies"),
        )
    )


@handler_error_json
def update_event(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return _ok(
        editing.update_event(
            model,
            arg_str(args, "context"),
            arg_str(args, "name"),
            description=opt_str(args, "description"),
            source=opt_str(args, "source"),
            fields=opt_dict_list(args, "fields"),
        )
    )


@handler_error_json
def remove_entity(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return _ok(editing.remove_entity(model, arg_str(args, "context"), arg_str(args, "name")))


# =============================================================================
# Compare / plan / save
# =============================================================================


def _load_changes(
    model: ir.DomainModel, workspace: str, store: ModelRepository, action: str
) -> list[ir.ModelChange]:
    try:
        persisted = store.load(workspace)
    except StoreError as e:
        raise ToolError(f"Failed to {action}: {e}") from e
    if persisted is None:
        persisted = ir.DomainModel.empty(workspace)
    return diff_models(persisted, model)


@handler_error_json
def compare_model(model: ir.DomainModel, workspace: str, store: ModelRepository) -> str:
    changes = _load_changes(model, workspace, store, "compare models")
    if not changes:
        return to_json(
            {"status": "no_changes", "message": "In-memory model matches persisted model"}
        )
    return to_json(
        {
            "status": "changes_detected",
            "change_count": len(changes),
            "changes": [c.to_dict() for c in changes],
        }
    )


@handler_error_json
def draft_refactoring_plan(model: ir.DomainModel, workspace: str, store: ModelRepository) -> str:
    changes = _load_changes(model, workspace, store, "load persisted model")
    if not changes:
        return to_json(
            {
                "status": "no_changes",
                "message": "In-memory model matches persisted model. Nothing to refactor.",
            }
        )
    plan = plan_refactoring(changes, model.conventions)
    logger.info(
        "Drafted plan: %d changes, %d actions", len(plan.model_changes), len(plan.code_actions)
    )
    return to_json(plan.to_dict())


@handler_error_json
def save_model(model: ir.DomainModel, workspace: str, store: ModelRepository) -> str:
    try:
        store.save(workspace, model)
    except StoreError as e:
        raise ToolError(f"Failed to save: {e}") from e
    return _ok(f"Domain model saved to store for workspace: {workspace}")


EDIT_HANDLERS = {
    "update_bounded_context": update_bounded_context,
    "update_entity": update_entity,
    "update_service": update_service,
    "update_event": update_event,
    "remove_entity": remove_entity,
}

STORE_HANDLERS = {
    "compare_model": compare_model,
    "draft_refactoring_plan": draft_refactoring_plan,
    "save_model": save_model,
}
