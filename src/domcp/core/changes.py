"""
Change detection between two versions of a domain model.

Walks a persisted snapshot and the current model context by context and
emits an ordered list of atomic ``ModelChange`` records. The walk is pure:
neither model is mutated and identical inputs give identical output.

Identity is case-insensitive name equality (rules: exact id). A rename is
therefore reported as a removal plus an addition.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from . import ir
from .ir import ChangeKind, ChangeShape, ModelChange

T = TypeVar("T")


def reconcile_named(
    old_items: Sequence[T],
    new_items: Sequence[T],
    key: Callable[[T], str],
    on_added: Callable[[T], None],
    on_removed: Callable[[T], None],
    on_matched: Callable[[T, T], None] | None = None,
    ignore_case: bool = True,
) -> None:
    """
    Reconcile two named collections.

    New items are visited in order: ``on_added`` when the old side has no
    item with the same key, ``on_matched(old, new)`` otherwise. Then old
    items without a counterpart are passed to ``on_removed``, in order.
    The first old item wins when keys repeat.
    """

    def norm(item: T) -> str:
        value = key(item)
        return value.lower() if ignore_case else value

    old_index: dict[str, T] = {}
    for item in old_items:
        old_index.setdefault(norm(item), item)
    new_keys = {norm(item) for item in new_items}

    for item in new_items:
        match = old_index.get(norm(item))
        if match is None:
            on_added(item)
        elif on_matched is not None:
            on_matched(match, item)

    for item in old_items:
        if norm(item) not in new_keys:
            on_removed(item)


def _snapshot(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return value


def _name(item: Any) -> str:
    return str(item.name)


def _identity(item: str) -> str:
    return item


class _ChangeLog:
    """Accumulates changes in emission order."""

    def __init__(self) -> None:
        self.changes: list[ModelChange] = []

    def emit(
        self,
        kind: ChangeKind,
        shape: ChangeShape,
        path: str,
        description: str,
        before: Any = None,
        after: Any = None,
        context: str = "",
        artifact: str = "",
        member: str = "",
    ) -> None:
        self.changes.append(
            ModelChange(
                kind=kind,
                path=path,
                description=description,
                before=_snapshot(before),
                after=_snapshot(after),
                shape=shape,
                context=context,
                artifact=artifact,
                member=member,
            )
        )

    def collection(
        self,
        ctx: str,
        collection: str,
        label: str,
        shape: ChangeShape,
        old_items: Sequence[Any],
        new_items: Sequence[Any],
        on_matched: Callable[[Any, Any], None] | None = None,
    ) -> None:
        """Added/removed artifacts of one context-level collection."""
        reconcile_named(
            old_items,
            new_items,
            _name,
            on_added=lambda item: self.emit(
                ChangeKind.ADDED,
                shape,
                f"{ctx}.{collection}.{item.name}",
                f"New {label} '{item.name}' in context '{ctx}'",
                after=item,
                context=ctx,
                artifact=item.name,
            ),
            on_removed=lambda item: self.emit(
                ChangeKind.REMOVED,
                shape,
                f"{ctx}.{collection}.{item.name}",
                f"Removed {label} '{item.name}' from context '{ctx}'",
                before=item,
                context=ctx,
                artifact=item.name,
            ),
            on_matched=on_matched,
        )


def diff_models(old: ir.DomainModel, new: ir.DomainModel) -> list[ModelChange]:
    """
    Diff two domain models and produce a structured change set.

    Args:
        old: Previously persisted snapshot
        new: Current model

    Returns:
        Changes in traversal order: contexts (each followed by its own
        sub-changes), removed contexts, then rules
    """
    log = _ChangeLog()

    reconcile_named(
        old.bounded_contexts,
        new.bounded_contexts,
        _name,
        on_added=lambda bc: log.emit(
            ChangeKind.ADDED,
            ChangeShape.CONTEXT,
            f"bounded_contexts.{bc.name}",
            f"New bounded context: {bc.name}",
            after={"name": bc.name, "module": bc.module_path},
            context=bc.name,
        ),
        on_removed=lambda bc: log.emit(
            ChangeKind.REMOVED,
            ChangeShape.CONTEXT,
            f"bounded_contexts.{bc.name}",
            f"Removed bounded context: {bc.name}",
            before={"name": bc.name},
            context=bc.name,
        ),
        on_matched=lambda old_bc, new_bc: _diff_context(log, old_bc, new_bc),
    )

    _diff_rules(log, old.rules, new.rules)
    return log.changes


def _diff_context(log: _ChangeLog, old: ir.BoundedContext, new: ir.BoundedContext) -> None:
    ctx = new.name

    if new.module_path and old.module_path != new.module_path:
        log.emit(
            ChangeKind.MOVED,
            ChangeShape.CONTEXT_MODULE_PATH,
            f"{ctx}.module_path",
            f"Context '{ctx}' moved: {old.module_path} -> {new.module_path}",
            before=old.module_path,
            after=new.module_path,
            context=ctx,
        )

    log.collection(
        ctx, "entities", "entity", ChangeShape.ENTITY, old.entities, new.entities,
        on_matched=lambda o, n: _diff_entity(log, ctx, o, n),
    )
    log.collection(
        ctx, "services", "service", ChangeShape.SERVICE, old.services, new.services,
        on_matched=lambda o, n: _diff_service(log, ctx, o, n),
    )
    log.collection(ctx, "events", "event", ChangeShape.EVENT, old.events, new.events)
    log.collection(
        ctx, "value_objects", "value object", ChangeShape.VALUE_OBJECT,
        old.value_objects, new.value_objects,
    )
    log.collection(
        ctx, "repositories", "repository", ChangeShape.REPOSITORY,
        old.repositories, new.repositories,
    )

    reconcile_named(
        old.dependencies,
        new.dependencies,
        _identity,
        on_added=lambda dep: log.emit(
            ChangeKind.ADDED,
            ChangeShape.CONTEXT_DEPENDENCY,
            f"{ctx}.dependencies.{dep}",
            f"New dependency: {ctx} -> {dep}",
            after=dep,
            context=ctx,
            member=dep,
        ),
        on_removed=lambda dep: log.emit(
            ChangeKind.REMOVED,
            ChangeShape.CONTEXT_DEPENDENCY,
            f"{ctx}.dependencies.{dep}",
            f"Removed dependency: {ctx} -> {dep}",
            before=dep,
            context=ctx,
            member=dep,
        ),
    )


def _diff_entity(log: _ChangeLog, ctx: str, old: ir.Entity, new: ir.Entity) -> None:
    name = new.name

    if old.aggregate_root != new.aggregate_root:
        log.emit(
            ChangeKind.MODIFIED,
            ChangeShape.ENTITY_AGGREGATE_ROOT,
            f"{ctx}.{name}.aggregate_root",
            f"'{name}' aggregate root: {old.aggregate_root} -> {new.aggregate_root}",
            before=old.aggregate_root,
            after=new.aggregate_root,
            context=ctx,
            artifact=name,
        )

    matched_fields: list[tuple[ir.Field, ir.Field]] = []

    def field_type_changed(old_f: ir.Field, new_f: ir.Field) -> None:
        if old_f.field_type != new_f.field_type:
            log.emit(
                ChangeKind.MODIFIED,
                ChangeShape.ENTITY_FIELD,
                f"{ctx}.{name}.fields.{new_f.name}",
                f"Field '{new_f.name}' on '{name}' type changed: "
                f"{old_f.field_type} -> {new_f.field_type}",
                before=old_f.field_type,
                after=new_f.field_type,
                context=ctx,
                artifact=name,
                member=new_f.name,
            )

    reconcile_named(
        old.fields,
        new.fields,
        _name,
        on_added=lambda f: log.emit(
            ChangeKind.ADDED,
            ChangeShape.ENTITY_FIELD,
            f"{ctx}.{name}.fields.{f.name}",
            f"New field '{f.name}: {f.field_type}' on entity '{name}'",
            after=f,
            context=ctx,
            artifact=name,
            member=f.name,
        ),
        on_removed=lambda f: log.emit(
            ChangeKind.REMOVED,
            ChangeShape.ENTITY_FIELD,
            f"{ctx}.{name}.fields.{f.name}",
            f"Removed field '{f.name}' from entity '{name}'",
            before=f,
            context=ctx,
            artifact=name,
            member=f.name,
        ),
        on_matched=lambda o, n: matched_fields.append((o, n)),
    )
    # Type changes follow all additions and removals
    for old_f, new_f in matched_fields:
        field_type_changed(old_f, new_f)

    # Only additions: a dropped invariant is not reported
    for invariant in _new_strings(old.invariants, new.invariants):
        log.emit(
            ChangeKind.ADDED,
            ChangeShape.ENTITY_INVARIANT,
            f"{ctx}.{name}.invariants",
            f"New invariant on '{name}': {invariant}",
            after=invariant,
            context=ctx,
            artifact=name,
        )


def _diff_service(log: _ChangeLog, ctx: str, old: ir.Service, new: ir.Service) -> None:
    name = new.name

    if old.kind != new.kind:
        log.emit(
            ChangeKind.MODIFIED,
            ChangeShape.SERVICE_KIND,
            f"{ctx}.services.{name}.kind",
            f"Service '{name}' kind changed: {old.kind.value} -> {new.kind.value}",
            before=old.kind.value,
            after=new.kind.value,
            context=ctx,
            artifact=name,
        )

    # Matched methods are not compared: signature edits go unreported
    reconcile_named(
        old.methods,
        new.methods,
        _name,
        on_added=lambda m: log.emit(
            ChangeKind.ADDED,
            ChangeShape.SERVICE_METHOD,
            f"{ctx}.services.{name}.methods.{m.name}",
            f"New method '{m.name}' on service '{name}'",
            after=m,
            context=ctx,
            artifact=name,
            member=m.name,
        ),
        on_removed=lambda m: log.emit(
            ChangeKind.REMOVED,
            ChangeShape.SERVICE_METHOD,
            f"{ctx}.services.{name}.methods.{m.name}",
            f"Removed method '{m.name}' from service '{name}'",
            before=m,
            context=ctx,
            artifact=name,
            member=m.name,
        ),
    )

    reconcile_named(
        old.dependencies,
        new.dependencies,
        _identity,
        on_added=lambda dep: log.emit(
            ChangeKind.ADDED,
            ChangeShape.SERVICE_DEPENDENCY,
            f"{ctx}.services.{name}.dependencies.{dep}",
            f"New dependency on service '{name}': {dep}",
            after=dep,
            context=ctx,
            artifact=name,
            member=dep,
        ),
        on_removed=lambda dep: log.emit(
            ChangeKind.REMOVED,
            ChangeShape.SERVICE_DEPENDENCY,
            f"{ctx}.services.{name}.dependencies.{dep}",
            f"Removed dependency on service '{name}': {dep}",
            before=dep,
            context=ctx,
            artifact=name,
            member=dep,
        ),
    )


def _diff_rules(
    log: _ChangeLog,
    old_rules: Sequence[ir.ArchitecturalRule],
    new_rules: Sequence[ir.ArchitecturalRule],
) -> None:
    matched_rules: list[tuple[ir.ArchitecturalRule, ir.ArchitecturalRule]] = []

    def rule_changed(old_r: ir.ArchitecturalRule, new_r: ir.ArchitecturalRule) -> None:
        if old_r.description != new_r.description or old_r.severity != new_r.severity:
            log.emit(
                ChangeKind.MODIFIED,
                ChangeShape.RULE,
                f"rules.{new_r.id}",
                f"Modified rule: {new_r.id}",
                before=old_r,
                after=new_r,
                artifact=new_r.id,
            )

    reconcile_named(
        old_rules,
        new_rules,
        lambda r: r.id,
        on_added=lambda r: log.emit(
            ChangeKind.ADDED,
            ChangeShape.RULE,
            f"rules.{r.id}",
            f"New rule: {r.id}: {r.description}",
            after=r,
            artifact=r.id,
        ),
        on_removed=lambda r: log.emit(
            ChangeKind.REMOVED,
            ChangeShape.RULE,
            f"rules.{r.id}",
            f"Removed rule: {r.id}",
            before=r,
            artifact=r.id,
        ),
        on_matched=lambda o, n: matched_rules.append((o, n)),
        ignore_case=False,
    )
    for old_r, new_r in matched_rules:
        rule_changed(old_r, new_r)


def _new_strings(old: Iterable[str], new: Iterable[str]) -> list[str]:
    known = set(old)
    return [value for value in new if value not in known]


__all__ = [
    "diff_models",
    "reconcile_named",
]
