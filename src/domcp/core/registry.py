"""
Read-only query access into a domain model.

Backs the MCP read tools and resources. Lookups are case-insensitive and
return the first match.
"""

from __future__ import annotations

from typing import Any

from . import ir


def _same(a: str, b: str) -> bool:
    return a.lower() == b.lower()


class DomainRegistry:
    """Query helper over one domain model."""

    def __init__(self, model: ir.DomainModel):
        self.model = model

    def find_context(self, name: str) -> ir.BoundedContext | None:
        for bc in self.model.bounded_contexts:
            if _same(bc.name, name):
                return bc
        return None

    def find_entity(self, name: str) -> tuple[ir.BoundedContext, ir.Entity] | None:
        for bc in self.model.bounded_contexts:
            for entity in bc.entities:
                if _same(entity.name, name):
                    return bc, entity
        return None

    def find_service(self, name: str) -> tuple[ir.BoundedContext, ir.Service] | None:
        for bc in self.model.bounded_contexts:
            for svc in bc.services:
                if _same(svc.name, name):
                    return bc, svc
        return None

    def context_names(self) -> list[str]:
        return [bc.name for bc in self.model.bounded_contexts]

    def architecture_summary(self) -> dict[str, Any]:
        """
        Compact, machine-readable overview of the whole model.

        Fields are rendered as ``"name: type (required)"`` and methods as
        ``"name(p: T) -> R"`` to keep the payload small.
        """
        model = self.model
        naming = model.conventions.naming
        return {
            "project": model.name,
            "tech": {
                "language": model.tech_stack.language,
                "framework": model.tech_stack.framework,
                "database": model.tech_stack.database,
                "messaging": model.tech_stack.messaging,
            },
            "bounded_contexts": [_context_summary(bc) for bc in model.bounded_contexts],
            "rules": [
                {"id": r.id, "severity": r.severity.value, "rule": r.description}
                for r in model.rules
            ],
            "conventions": {
                "file_pattern": model.conventions.file_structure.pattern,
                "layers": model.conventions.file_structure.layers,
                "naming": {
                    "entities": naming.entities,
                    "services": naming.services,
                    "events": naming.events,
                    "value_objects": naming.value_objects,
                    "repositories": naming.repositories,
                },
                "error_handling": model.conventions.error_handling,
                "testing": model.conventions.testing,
            },
        }


def _context_summary(bc: ir.BoundedContext) -> dict[str, Any]:
    return {
        "name": bc.name,
        "module": bc.module_path,
        "entities": [
            {
                "name": e.name,
                "aggregate_root": e.aggregate_root,
                "fields": [
                    f"{f.name}: {f.field_type}{' (required)' if f.required else ''}"
                    for f in e.fields
                ],
                "methods": [m.signature() for m in e.methods],
                "invariants": e.invariants,
            }
            for e in bc.entities
        ],
        "value_objects": [v.name for v in bc.value_objects],
        "services": [{"name": s.name, "kind": s.kind.value} for s in bc.services],
        "events": [e.name for e in bc.events],
        "repositories": [{"name": r.name, "aggregate": r.aggregate} for r in bc.repositories],
        "depends_on": bc.dependencies,
    }


__all__ = ["DomainRegistry"]
