"""
Read tool handlers.

Each handler takes the live model and the raw tool arguments and returns a
JSON string. Lookups are case-insensitive.
"""

from __future__ import annotations

from typing import Any

from domcp.core import ir
from domcp.core.errors import ToolError
from domcp.core.paths import DEFAULT_PATTERN, layer_for_kind, resolve_path
from domcp.core.registry import DomainRegistry

from .common import arg_str, handler_error_json, to_json


@handler_error_json
def get_architecture_overview(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return to_json(DomainRegistry(model).architecture_summary())


@handler_error_json
def get_bounded_context(model: ir.DomainModel, args: dict[str, Any]) -> str:
    name = arg_str(args, "name")
    registry = DomainRegistry(model)
    bc = registry.find_context(name)
    if bc is None:
        available = ", ".join(registry.context_names()) or "none"
        raise ToolError(f"Bounded context '{name}' not found. Available: {available}")
    return to_json(bc.model_dump(mode="json", by_alias=True))


@handler_error_json
def get_entity(model: ir.DomainModel, args: dict[str, Any]) -> str:
    name = arg_str(args, "name")
    found = DomainRegistry(model).find_entity(name)
    if found is None:
        raise ToolError(f"Entity '{name}' not found in any bounded context")
    bc, entity = found
    return to_json(
        {
            "bounded_context": bc.name,
            "module_path": bc.module_path,
            "entity": entity.model_dump(mode="json", by_alias=True),
        }
    )


@handler_error_json
def get_service_spec(model: ir.DomainModel, args: dict[str, Any]) -> str:
    name = arg_str(args, "name")
    found = DomainRegistry(model).find_service(name)
    if found is None:
        raise ToolError(f"Service '{name}' not found")
    bc, svc = found
    return to_json(
        {
            "bounded_context": bc.name,
            "service": svc.model_dump(mode="json", by_alias=True),
        }
    )


@handler_error_json
def validate_dependency(model: ir.DomainModel, args: dict[str, Any]) -> str:
    """Is ``to_context`` listed among the declared dependencies of ``from_context``?"""
    source = arg_str(args, "from_context")
    target = arg_str(args, "to_context")

    bc = DomainRegistry(model).find_context(source)
    if bc is None:
        raise ToolError(f"Bounded context '{source}' not found")

    allowed = any(dep.lower() == target.lower() for dep in bc.dependencies)
    if allowed:
        explanation = f"'{target}' is an allowed dependency of '{source}'"
    else:
        declared = ", ".join(bc.dependencies) or "none"
        explanation = (
            f"'{source}' is NOT allowed to depend on '{target}'. "
            f"Allowed dependencies: {declared}"
        )
    return to_json({"from": source, "to": target, "allowed": allowed, "explanation": explanation})


@handler_error_json
def get_architectural_rules(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return to_json([r.model_dump(mode="json") for r in model.rules])


@handler_error_json
def get_conventions(model: ir.DomainModel, args: dict[str, Any]) -> str:
    return to_json(model.conventions.model_dump(mode="json"))


@handler_error_json
def suggest_file_path(model: ir.DomainModel, args: dict[str, Any]) -> str:
    context = arg_str(args, "context")
    kind = arg_str(args, "kind")
    name = arg_str(args, "name")
    pattern = model.conventions.file_structure.pattern
    layer = layer_for_kind(kind)

    result: dict[str, Any] = {
        "suggested_path": resolve_path(pattern, context, layer, name),
        "pattern": pattern or DEFAULT_PATTERN,
        "layer": layer,
    }
    if not pattern:
        result["note"] = "No file structure pattern configured; using the default pattern"
    return to_json(result)


READ_HANDLERS = {
    "get_architecture_overview": get_architecture_overview,
    "get_bounded_context": get_bounded_context,
    "get_entity": get_entity,
    "get_service_spec": get_service_spec,
    "validate_dependency": validate_dependency,
    "get_architectural_rules": get_architectural_rules,
    "get_conventions": get_conventions,
    "suggest_file_path": suggest_file_path,
}
