"""
Change and refactoring plan types for DOMCP IR.

A ``ModelChange`` is one atomic difference between two model snapshots. A
``RefactoringPlan`` is what the planner derives from a list of them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ChangeKind(str, Enum):
    """Kind of structural change."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    MOVED = "moved"


class ChangeShape(str, Enum):
    """
    What a change is about.

    Tagged by the differ when the change is emitted, so the planner never
    has to recover it from the dotted path.
    """

    CONTEXT = "context"
    CONTEXT_MODULE_PATH = "context_module_path"
    CONTEXT_DEPENDENCY = "context_dependency"
    ENTITY = "entity"
    ENTITY_AGGREGATE_ROOT = "entity_aggregate_root"
    ENTITY_FIELD = "entity_field"
    ENTITY_INVARIANT = "entity_invariant"
    SERVICE = "service"
    SERVICE_KIND = "service_kind"
    SERVICE_METHOD = "service_method"
    SERVICE_DEPENDENCY = "service_dependency"
    EVENT = "event"
    VALUE_OBJECT = "value_object"
    REPOSITORY = "repository"
    RULE = "rule"


class ModelChange(BaseModel):
    """
    One atomic change between two model snapshots.

    Attributes:
        kind: Added, removed, modified or moved
        path: Dot-separated logical address
              (e.g. "Identity.User.fields.email")
        description: Human-readable summary
        before: State on the old side, omitted when not meaningful
        after: State on the new side, omitted when not meaningful
        shape: What the change is about (not serialized)
        context: Bounded context name (not serialized)
        artifact: Entity / service / event / ... name (not serialized)
        member: Field / method / dependency name (not serialized)
    """

    kind: ChangeKind
    path: str
    description: str
    before: Any | None = None
    after: Any | None = None

    shape: ChangeShape = Field(exclude=True)
    context: str = Field(default="", exclude=True)
    artifact: str = Field(default="", exclude=True)
    member: str = Field(default="", exclude=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict without the empty side."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelChange:
        """
        Rebuild a change from its ``to_dict`` form.

        The shape and locators are recovered from the path, which only
        round-trips for names without dots.

        Raises:
            ValueError: If the path does not match any change shape
        """
        shape, context, artifact, member = _locate(str(data.get("path", "")))
        return cls(
            **{k: v for k, v in data.items() if k not in _LOCATOR_KEYS},
            shape=shape,
            context=context,
            artifact=artifact,
            member=member,
        )


_LOCATOR_KEYS = frozenset({"shape", "context", "artifact", "member"})

_COLLECTION_SHAPES = {
    "entities": ChangeShape.ENTITY,
    "services": ChangeShape.SERVICE,
    "events": ChangeShape.EVENT,
    "value_objects": ChangeShape.VALUE_OBJECT,
    "repositories": ChangeShape.REPOSITORY,
}

_SERVICE_MEMBER_SHAPES = {
    "methods": ChangeShape.SERVICE_METHOD,
    "dependencies": ChangeShape.SERVICE_DEPENDENCY,
}


def _locate(path: str) -> tuple[ChangeShape, str, str, str]:
    """Map a change path to (shape, context, artifact, member)."""
    head, _, rest = path.partition(".")
    if head == "bounded_contexts" and rest:
        return ChangeShape.CONTEXT, rest, "", ""
    if head == "rules" and rest:
        return ChangeShape.RULE, "", rest, ""

    parts = path.split(".")
    ctx = parts[0]
    if len(parts) == 2 and parts[1] == "module_path":
        return ChangeShape.CONTEXT_MODULE_PATH, ctx, "", ""
    if len(parts) == 3:
        if parts[1] in _COLLECTION_SHAPES:
            return _COLLECTION_SHAPES[parts[1]], ctx, parts[2], ""
        if parts[1] == "dependencies":
            return ChangeShape.CONTEXT_DEPENDENCY, ctx, "", parts[2]
        if parts[2] == "aggregate_root":
            return ChangeShape.ENTITY_AGGREGATE_ROOT, ctx, parts[1], ""
        if parts[2] == "invariants":
            return ChangeShape.ENTITY_INVARIANT, ctx, parts[1], ""
    if len(parts) == 4:
        if parts[2] == "fields":
            return ChangeShape.ENTITY_FIELD, ctx, parts[1], parts[3]
        if parts[1] == "services" and parts[3] == "kind":
            return ChangeShape.SERVICE_KIND, ctx, parts[2], ""
    if len(parts) == 5 and parts[1] == "services" and parts[3] in _SERVICE_MEMBER_SHAPES:
        return _SERVICE_MEMBER_SHAPES[parts[3]], ctx, parts[2], parts[4]

    raise ValueError(f"Unrecognized change path: {path}")


class ActionKind(str, Enum):
    """Concrete file-level instruction."""

    CREATE_FILE = "create_file"
    MODIFY_FILE = "modify_file"
    DELETE_FILE = "delete_file"
    MOVE_FILE = "move_file"
    UPDATE_IMPORTS = "update_imports"
    ADD_TEST = "add_test"


class Priority(str, Enum):
    """Action priority; ``rank`` orders Critical before Low."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class CodeAction(BaseModel):
    """A concrete code action to perform."""

    action_kind: ActionKind
    file_path: str
    description: str
    priority: Priority


class RefactoringPlan(BaseModel):
    """
    Refactoring plan derived from model changes.

    Attributes:
        model_changes: The input changes, echoed for traceability
        code_actions: Actions sorted by priority (stable)
        migration_notes: Data migration warnings, in change order
    """

    model_changes: list[ModelChange] = Field(default_factory=list)
    code_actions: list[CodeAction] = Field(default_factory=list)
    migration_notes: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(exclude_none=True, indent=indent)
