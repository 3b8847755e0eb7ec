"""
Create-or-update operations on a live domain model.

Used by the MCP write tools. Lookups are case-insensitive; nested fields
and methods are merged by exact name rather than replaced, so an assistant
can describe an artifact incrementally.

Field and method specs are plain dicts as they arrive from a tool call:

    {"name": "email", "type": "Email", "required": True, "description": "..."}
    {"name": "rename", "description": "...", "parameters": [...], "return_type": "None"}

Every operation returns a short human-readable message and raises
``ToolError`` when the target cannot be resolved.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from . import ir
from .errors import ToolError

FieldSpec = Mapping[str, Any]
MethodSpec = Mapping[str, Any]


# =============================================================================
# Spec parsing
# =============================================================================


def parse_fields(specs: Iterable[FieldSpec] | None) -> list[ir.Field]:
    """Build fields from specs, skipping entries without a name or type."""
    fields: list[ir.Field] = []
    for spec in specs or []:
        name, field_type = spec.get("name"), spec.get("type")
        if not isinstance(name, str) or not isinstance(field_type, str):
            continue
        fields.append(
            ir.Field(
                name=name,
                field_type=field_type,
                required=bool(spec.get("required", False)),
                description=spec.get("description") or "",
            )
        )
    return fields


def parse_methods(specs: Iterable[MethodSpec] | None) -> list[ir.Method]:
    """Build methods from specs, skipping entries without a name."""
    methods: list[ir.Method] = []
    for spec in specs or []:
        name = spec.get("name")
        if not isinstance(name, str):
            continue
        methods.append(
            ir.Method(
                name=name,
                description=spec.get("description") or "",
                parameters=parse_fields(spec.get("parameters")),
                return_type=spec.get("return_type") or "",
            )
        )
    return methods


def merge_fields(existing: list[ir.Field], specs: Iterable[FieldSpec]) -> None:
    """
    Merge field specs into ``existing`` in place.

    A spec matching an existing field by exact name updates the keys it
    carries (type, required, description); any other spec is appended.
    """
    for spec in specs:
        name = spec.get("name")
        if not isinstance(name, str):
            continue
        current = next((f for f in existing if f.name == name), None)
        if current is None:
            existing.extend(parse_fields([spec]))
            continue
        if isinstance(spec.get("type"), str):
            current.field_type = spec["type"]
        if isinstance(spec.get("required"), bool):
            current.required = spec["required"]
        if isinstance(spec.get("description"), str):
            current.description = spec["description"]


def merge_methods(existing: list[ir.Method], specs: Iterable[MethodSpec]) -> None:
    """
    Merge method specs into ``existing`` in place.

    Matched methods (exact name) only take a new description and return
    type; their parameters are left untouched.
    """
    for spec in specs:
        name = spec.get("name")
        if not isinstance(name, str):
            continue
        current = next((m for m in existing if m.name == name), None)
        if current is None:
            existing.extend(parse_methods([spec]))
            continue
        if isinstance(spec.get("description"), str):
            current.description = spec["description"]
        if isinstance(spec.get("return_type"), str):
            current.return_type = spec["return_type"]


# =============================================================================
# Lookup
# =============================================================================


def _find(items: Iterable[Any], name: str) -> Any:
    lowered = name.lower()
    return next((item for item in items if item.name.lower() == lowered), None)


def require_context(model: ir.DomainModel, name: str) -> ir.BoundedContext:
    bc = _find(model.bounded_contexts, name)
    if bc is None:
        raise ToolError(f"Bounded context '{name}' not found")
    return bc


# =============================================================================
# Operations
# =============================================================================


def update_bounded_context(
    model: ir.DomainModel,
    name: str,
    description: str | None = None,
    module_path: str | None = None,
    dependencies: Sequence[str] | None = None,
) -> str:
    """Create or update a bounded context. Dependencies are replaced wholesale."""
    if not name:
        raise ToolError("'name' is required")

    bc = _find(model.bounded_contexts, name)
    if bc is None:
        model.bounded_contexts.append(
            ir.BoundedContext(
                name=name,
                description=description or "",
                module_path=module_path or "",
                dependencies=list(dependencies or []),
            )
        )
        return f"Created bounded context '{name}'"

    if description is not None:
        bc.description = description
    if module_path is not None:
        bc.module_path = module_path
    if dependencies is not None:
        bc.dependencies = list(dependencies)
    return f"Updated bounded context '{name}'"


def update_entity(
    model: ir.DomainModel,
    context: str,
    name: str,
    description: str | None = None,
    aggregate_root: bool | None = None,
    fields: Sequence[FieldSpec] | None = None,
    methods: Sequence[MethodSpec] | None = None,
    invariants: Sequence[str] | None = None,
) -> str:
    """Create or update an entity; fields, methods and invariants are merged."""
    bc = require_context(model, context)

    entity = _find(bc.entities, name)
    if entity is None:
        bc.entities.append(
            ir.Entity(
                name=name,
                description=description or "",
                aggregate_root=bool(aggregate_root),
                fields=parse_fields(fields),
                methods=parse_methods(methods),
                invariants=list(invariants or []),
            )
        )
        return f"Created entity '{name}' in '{context}'"

    if description is not None:
        entity.description = description
    if aggregate_root is not None:
        entity.aggregate_root = aggregate_root
    if fields is not None:
        merge_fields(entity.fields, fields)
    if methods is not None:
        merge_methods(entity.methods, methods)
    for invariant in invariants or []:
        if invariant not in entity.invariants:
            entity.invariants.append(invariant)
    return f"Updated entity '{name}' in '{context}'"


def update_service(
    model: ir.DomainModel,
    context: str,
    name: str,
    description: str | None = None,
    kind: str | None = None,
    methods: Sequence[MethodSpec] | None = None,
    dependencies: Sequence[str] | None = None,
) -> str:
    """
    Create or update a service.

    ``kind`` is always written: an omitted or unknown kind means ``domain``,
    even when updating a service that had another kind.
    """
    bc = require_context(model, context)
    try:
        service_kind = ir.ServiceKind(kind or "domain")
    except ValueError:
        service_kind = ir.ServiceKind.DOMAIN

    svc = _find(bc.services, name)
    if svc is None:
        bc.services.append(
            ir.Service(
                name=name,
                description=description or "",
                kind=service_kind,
                methods=parse_methods(methods),
                dependencies=list(dependencies or []),
            )
        )
        return f"Created service '{name}' in '{context}'"

    if description is not None:
        svc.description = description
    svc.kind = service_kind
    if dependencies is not None:
        svc.dependencies = list(dependencies)
    if methods is not None:
        merge_methods(svc.methods, methods)
    return f"Updated service '{name}' in '{context}'"


def update_event(
    model: ir.DomainModel,
    context: str,
    name: str,
    description: str | None = None,
    source: str | None = None,
    fields: Sequence[FieldSpec] | None = None,
) -> str:
    """Create or update a domain event; fields are merged."""
    bc = require_context(model, context)

    event = _find(bc.events, name)
    if event is None:
        bc.events.append(
            ir.DomainEvent(
                name=name,
                description=description or "",
                fields=parse_fields(fields),
                source=source or "",
            )
        )
        return f"Created event '{name}' in '{context}'"

    if description is not None:
        event.description = description
    if source is not None:
        event.source = source
    if fields is not None:
        merge_fields(event.fields, fields)
    return f"Updated event '{name}' in '{context}'"


def remove_entity(model: ir.DomainModel, context: str, name: str) -> str:
    """Remove every entity of the context matching ``name``."""
    bc = require_context(model, context)

    lowered = name.lower()
    kept = [e for e in bc.entities if e.name.lower() != lowered]
    if len(kept) == len(bc.entities):
        raise ToolError(f"Entity '{name}' not found in '{context}'")
    bc.entities = kept
    return f"Removed entity '{name}' from '{context}'"


__all__ = [
    "parse_fields",
    "parse_methods",
    "merge_fields",
    "merge_methods",
    "require_context",
    "update_bounded_context",
    "update_entity",
    "update_service",
    "update_event",
    "remove_entity",
]
