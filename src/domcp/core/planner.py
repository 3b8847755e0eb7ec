"""
Refactoring plan generation.

Translates a change set into concrete code actions and migration notes.
Each change is classified by its kind and shape; shapes with no entry in
the table below produce nothing.

    added    context             create one module per layer    high
    added    entity              create file + add test         high/medium
    added    entity field        modify file                    high
    added    service             create file (application)      high
    added    event               create file (domain)           medium
    added    entity invariant    add test                       medium
    added    context dependency  update imports                 medium
    removed  entity              delete file                    critical
    removed  entity field        modify file                    high
    modified entity field        modify file                    critical
    moved    context module      move file                      critical
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from . import ir
from .ir import ActionKind, ChangeKind, ChangeShape, CodeAction, ModelChange, Priority
from .paths import context_module_path, layer_module_path, resolve_path

DOMAIN_LAYER = "domain"
APPLICATION_LAYER = "application"


class _PlanBuilder:
    """Collects actions and notes for one planning run."""

    def __init__(self, conventions: ir.Conventions) -> None:
        self.pattern = conventions.file_structure.pattern
        self.layers = list(conventions.file_structure.layers)
        self.actions: list[CodeAction] = []
        self.notes: list[str] = []

    def action(self, kind: ActionKind, file_path: str, description: str, priority: Priority) -> None:
        self.actions.append(
            CodeAction(
                action_kind=kind,
                file_path=file_path,
                description=description,
                priority=priority,
            )
        )

    def path(self, change: ModelChange, layer: str, name: str) -> str:
        return resolve_path(self.pattern, change.context, layer, name)


_Rule = Callable[[_PlanBuilder, ModelChange], None]


def _context_added(plan: _PlanBuilder, change: ModelChange) -> None:
    for layer in plan.layers:
        plan.action(
            ActionKind.CREATE_FILE,
            layer_module_path(plan.pattern, change.context, layer),
            f"Create {layer} layer module for context '{change.context}'",
            Priority.HIGH,
        )


def _entity_added(plan: _PlanBuilder, change: ModelChange) -> None:
    entity = change.artifact
    file_path = plan.path(change, DOMAIN_LAYER, entity)
    plan.action(ActionKind.CREATE_FILE, file_path, f"Create entity '{entity}'", Priority.HIGH)
    plan.action(
        ActionKind.ADD_TEST, file_path, f"Add unit tests for entity '{entity}'", Priority.MEDIUM
    )
    plan.notes.append(f"New entity '{entity}': may need database migration")


def _field_added(plan: _PlanBuilder, change: ModelChange) -> None:
    entity, field = change.artifact, change.member
    plan.action(
        ActionKind.MODIFY_FILE,
        plan.path(change, DOMAIN_LAYER, entity),
        f"Add field '{field}' to entity '{entity}'",
        Priority.HIGH,
    )
    plan.notes.append(f"New field '{field}' on '{entity}': needs ALTER TABLE migration")


def _service_added(plan: _PlanBuilder, change: ModelChange) -> None:
    plan.action(
        ActionKind.CREATE_FILE,
        plan.path(change, APPLICATION_LAYER, change.artifact),
        f"Create service '{change.artifact}'",
        Priority.HIGH,
    )


def _event_added(plan: _PlanBuilder, change: ModelChange) -> None:
    plan.action(
        ActionKind.CREATE_FILE,
        plan.path(change, DOMAIN_LAYER, change.artifact),
        f"Create domain event '{change.artifact}'",
        Priority.MEDIUM,
    )


def _invariant_added(plan: _PlanBuilder, change: ModelChange) -> None:
    plan.action(
        ActionKind.ADD_TEST,
        plan.path(change, DOMAIN_LAYER, change.artifact),
        f"Add test for new invariant on '{change.artifact}'",
        Priority.MEDIUM,
    )


def _dependency_added(plan: _PlanBuilder, change: ModelChange) -> None:
    plan.action(
        ActionKind.UPDATE_IMPORTS,
        context_module_path(plan.pattern, change.context),
        f"Wire dependency '{change.context}' -> '{change.member}'",
        Priority.MEDIUM,
    )


def _entity_removed(plan: _PlanBuilder, change: ModelChange) -> None:
    entity = change.artifact
    plan.action(
        ActionKind.DELETE_FILE,
        plan.path(change, DOMAIN_LAYER, entity),
        f"Remove entity '{entity}' and all references",
        Priority.CRITICAL,
    )
    plan.notes.append(f"Removed entity '{entity}': needs DROP TABLE migration")


def _field_removed(plan: _PlanBuilder, change: ModelChange) -> None:
    entity, field = change.artifact, change.member
    plan.action(
        ActionKind.MODIFY_FILE,
        plan.path(change, DOMAIN_LAYER, entity),
        f"Remove field '{field}' from entity '{entity}'",
        Priority.HIGH,
    )
    plan.notes.append(f"Removed field '{field}' from '{entity}': needs ALTER TABLE migration")


def _field_modified(plan: _PlanBuilder, change: ModelChange) -> None:
    entity, field = change.artifact, change.member
    plan.action(
        ActionKind.MODIFY_FILE,
        plan.path(change, DOMAIN_LAYER, entity),
        f"Update field type for '{field}' on '{entity}'",
        Priority.CRITICAL,
    )
    plan.notes.append(f"Field type change on '{entity}.{field}': needs data migration")


def _module_moved(plan: _PlanBuilder, change: ModelChange) -> None:
    if change.before is None or change.after is None:
        return
    plan.action(
        ActionKind.MOVE_FILE,
        str(change.before),
        f"Move module from {change.before} to {change.after}",
        Priority.CRITICAL,
    )


PLAN_RULES: dict[tuple[ChangeKind, ChangeShape], _Rule] = {
    (ChangeKind.ADDED, ChangeShape.CONTEXT): _context_added,
    (ChangeKind.ADDED, ChangeShape.ENTITY): _entity_added,
    (ChangeKind.ADDED, ChangeShape.ENTITY_FIELD): _field_added,
    (ChangeKind.ADDED, ChangeShape.SERVICE): _service_added,
    (ChangeKind.ADDED, ChangeShape.EVENT): _event_added,
    (ChangeKind.ADDED, ChangeShape.ENTITY_INVARIANT): _invariant_added,
    (ChangeKind.ADDED, ChangeShape.CONTEXT_DEPENDENCY): _dependency_added,
    (ChangeKind.REMOVED, ChangeShape.ENTITY): _entity_removed,
    (ChangeKind.REMOVED, ChangeShape.ENTITY_FIELD): _field_removed,
    (ChangeKind.MODIFIED, ChangeShape.ENTITY_FIELD): _field_modified,
    (ChangeKind.MOVED, ChangeShape.CONTEXT_MODULE_PATH): _module_moved,
}


def plan_refactoring(
    changes: Sequence[ModelChange],
    conventions: ir.Conventions,
) -> ir.RefactoringPlan:
    """
    Generate a refactoring plan from model changes.

    Args:
        changes: Changes as produced by ``diff_models``
        conventions: Conventions of the current model (path template, layers)

    Returns:
        RefactoringPlan with the changes echoed, actions sorted by priority
        (stable, so equal priorities keep change order) and migration notes
        in change order
    """
    plan = _PlanBuilder(conventions)

    for change in changes:
        rule = PLAN_RULES.get((change.kind, change.shape))
        if rule is not None:
            rule(plan, change)

    return ir.RefactoringPlan(
        model_changes=list(changes),
        code_actions=sorted(plan.actions, key=lambda a: a.priority.rank),
        migration_notes=plan.notes,
    )


__all__ = [
    "PLAN_RULES",
    "plan_refactoring",
]
