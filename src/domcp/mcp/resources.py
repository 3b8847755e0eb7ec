"""
Resource definitions for the DOMCP MCP server.

Resources are data sources that an assistant can reference by URI:
three fixed architecture views plus one entry per bounded context.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote, unquote

from domcp.core import ir
from domcp.core.registry import DomainRegistry

OVERVIEW_URI = "domcp://architecture/overview"
RULES_URI = "domcp://architecture/rules"
CONVENTIONS_URI = "domcp://architecture/conventions"
CONTEXT_URI_PREFIX = "domcp://context/"


def context_uri(name: str) -> str:
    """URI of a bounded context resource; the name is percent-encoded."""
    return f"{CONTEXT_URI_PREFIX}{quote(name.lower(), safe='')}"


def create_resources(model: ir.DomainModel) -> list[dict[str, Any]]:
    """
    Create available resources for the MCP server.

    Args:
        model: Live domain model (one resource per bounded context)

    Returns:
        List of resource definitions with URI, name, description and mimeType
    """
    resources = [
        {
            "uri": OVERVIEW_URI,
            "name": "Architecture Overview",
            "description": "Complete architecture overview with all bounded contexts, entities, and rules",
            "mimeType": "application/json",
        },
        {
            "uri": RULES_URI,
            "name": "Architectural Rules",
            "description": "All architectural constraints and rules",
            "mimeType": "application/json",
        },
        {
            "uri": CONVENTIONS_URI,
            "name": "Conventions",
            "description": "Naming, file structure, error handling, and testing conventions",
            "mimeType": "application/json",
        },
    ]

    for bc in model.bounded_contexts:
        resources.append(
            {
                "uri": context_uri(bc.name),
                "name": f"Context: {bc.name}",
                "description": f"Bounded context '{bc.name}': entities, services, events",
                "mimeType": "application/json",
            }
        )

    return resources


def read_resource(model: ir.DomainModel, uri: str) -> str:
    """Read a resource by URI; unknown URIs read as an explanatory text."""
    registry = DomainRegistry(model)

    if uri == OVERVIEW_URI:
        return json.dumps(registry.architecture_summary(), indent=2)
    elif uri == RULES_URI:
        return json.dumps([r.model_dump(mode="json") for r in model.rules], indent=2)
    elif uri == CONVENTIONS_URI:
        return json.dumps(model.conventions.model_dump(mode="json"), indent=2)
    elif uri.startswith(CONTEXT_URI_PREFIX):
        name = unquote(uri.removeprefix(CONTEXT_URI_PREFIX))
        bc = registry.find_context(name)
        if bc is None:
            return f"Bounded context '{name}' not found"
        return json.dumps(bc.model_dump(mode="json", by_alias=True), indent=2)

    return f"Unknown resource: {uri}"
