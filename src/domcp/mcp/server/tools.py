"""
MCP Server tool definitions.

This module contains the tool schema definitions for the MCP server.
"""

from __future__ import annotations

from typing import Any

from mcp.types import Tool

NO_ARGS_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}, "required": []}

_NAME_ONLY = {"type": "string"}

PARAMETER_SCHEMA = {
    "type": "object",
    "properties": {"name": _NAME_ONLY, "type": {"type": "string"}},
    "required": ["name", "type"],
}

FIELD_SCHEMA = {
    "type": "object",
    "properties": {
        "name": _NAME_ONLY,
        "type": {"type": "string"},
        "required": {"type": "boolean"},
        "description": {"type": "string"},
    },
    "required": ["name", "type"],
}

METHOD_SCHEMA = {
    "type": "object",
    "properties": {
        "name": _NAME_ONLY,
        "description": {"type": "string"},
        "parameters": {"type": "array", "items": PARAMETER_SCHEMA},
        "return_type": {"type": "string"},
    },
    "required": ["name"],
}

STRING_LIST_SCHEMA = {"type": "array", "items": {"type": "string"}}

CONTEXT_ARG = {"context": {"type": "string", "description": "Bounded context name"}}


def get_read_tools() -> list[Tool]:
    """Tools that query the model without changing it."""
    return [
        Tool(
            name="get_architecture_overview",
            description=(
                "Returns a full architecture overview including bounded contexts, entities, "
                "services, events, rules, and conventions. Use this before writing any new "
                "code to understand the system structure."
            ),
            inputSchema=NO_ARGS_SCHEMA,
        ),
        Tool(
            name="get_bounded_context",
            description=(
                "Returns detailed information about a specific bounded context, including "
                "its entities, value objects, services, repositories, domain events, and "
                "allowed dependencies."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Name of the bounded context"}
                },
                "required": ["name"],
            },
        ),
        Tool(
            name="get_entity",
            description=(
                "Returns the full specification of a domain entity including fields, "
                "methods, invariants, and whether it is an aggregate root. Use this when "
                "implementing or modifying an entity."
            ),
            inputSchema={
                "type": "object",
                "properties": {"name": {"type": "string", "description": "Name of the entity"}},
                "required": ["name"],
            },
        ),
        Tool(
            name="get_service_spec",
            description=(
                "Returns the specification for a domain/application/infrastructure service "
                "including its methods, dependencies, and layer classification."
            ),
            inputSchema={
                "type": "object",
                "properties": {"name": {"type": "string", "description": "Name of the service"}},
                "required": ["name"],
            },
        ),
        Tool(
            name="validate_dependency",
            description=(
                "Checks whether a dependency from one bounded context to another is allowed "
                "per the architectural rules. Returns allowed/denied with explanation."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "from_context": {
                        "type": "string",
                        "description": "Source bounded context name",
                    },
                    "to_context": {
                        "type": "string",
                        "description": "Target bounded context name",
                    },
                },
                "required": ["from_context", "to_context"],
            },
        ),
        Tool(
            name="get_architectural_rules",
            description=(
                "Returns all architectural rules and constraints that code must adhere to. "
                "Check these rules before generating or modifying code."
            ),
            inputSchema=NO_ARGS_SCHEMA,
        ),
        Tool(
            name="get_conventions",
            description=(
                "Returns naming conventions, file structure patterns, error handling "
                "strategy, and testing conventions for the project."
            ),
            inputSchema=NO_ARGS_SCHEMA,
        ),
        Tool(
            name="suggest_file_path",
            description=(
                "Given a type category (entity, service, repository, event, value_object) "
                "and a bounded context, suggests the correct file path following project "
                "conventions."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    **CONTEXT_ARG,
                    "kind": {
                        "type": "string",
                        "enum": ["entity", "value_object", "service", "repository", "event"],
                        "description": "Type of domain artifact",
                    },
                    "name": {"type": "string", "description": "Name of the artifact"},
                },
                "required": ["context", "kind", "name"],
            },
        ),
    ]


def get_write_tools() -> list[Tool]:
    """Tools that edit, compare or persist the model."""
    return [
        Tool(
            name="update_bounded_context",
            description=(
                "Create or update a bounded context in the domain model. Use this when "
                "analyzing a codebase to persist discovered contexts, or when refactoring "
                "the architecture."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Bounded context name"},
                    "description": {"type": "string"},
                    "module_path": {"type": "string", "description": "e.g. src/billing"},
                    "dependencies": {
                        **STRING_LIST_SCHEMA,
                        "description": "Allowed dependencies to other contexts",
                    },
                },
                "required": ["name"],
            },
        ),
        Tool(
            name="update_entity",
            description=(
                "Create or update an entity within a bounded context. Use when discovering "
                "entities in existing code or refactoring. Fields, methods, and invariants "
                "are merged (not replaced)."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    **CONTEXT_ARG,
                    "name": {"type": "string", "description": "Entity name"},
                    "description": {"type": "string"},
                    "aggregate_root": {"type": "boolean"},
                    "fields": {"type": "array", "items": FIELD_SCHEMA},
                    "methods": {"type": "array", "items": METHOD_SCHEMA},
                    "invariants": STRING_LIST_SCHEMA,
                },
                "required": ["context", "name"],
            },
        ),
        Tool(
            name="update_service",
            description=(
                "Create or update a service within a bounded context. Use when discovering "
                "services in existing code."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    **CONTEXT_ARG,
                    "name": {"type": "string", "description": "Service name"},
                    "description": {"type": "string"},
                    "kind": {
                        "type": "string",
                        "enum": ["domain", "application", "infrastructure"],
                    },
                    "methods": {"type": "array", "items": METHOD_SCHEMA},
                    "dependencies": STRING_LIST_SCHEMA,
                },
                "required": ["context", "name"],
            },
        ),
        Tool(
            name="update_event",
            description="Create or update a domain event within a bounded context.",
            inputSchema={
                "type": "object",
                "properties": {
                    **CONTEXT_ARG,
                    "name": {"type": "string", "description": "Event name"},
                    "description": {"type": "string"},
                    "source": {"type": "string", "description": "Which entity emits this"},
                    "fields": {"type": "array", "items": FIELD_SCHEMA},
                },
                "required": ["context", "name"],
            },
        ),
        Tool(
            name="remove_entity",
            description="Remove an entity from a bounded context.",
            inputSchema={
                "type": "object",
                "properties": {**CONTEXT_ARG, "name": {"type": "string"}},
                "required": ["context", "name"],
            },
        ),
        Tool(
            name="compare_model",
            description=(
                "Compare the current in-memory domain model against the persisted version. "
                "Returns a list of changes (added, removed, modified, moved) without "
                "generating code actions. Use this to review what changed before drafting "
                "a refactoring plan."
            ),
            inputSchema=NO_ARGS_SCHEMA,
        ),
        Tool(
            name="draft_refactoring_plan",
            description=(
                "Compare the current in-memory domain model against the persisted version "
                "and return a full refactoring plan with concrete code actions, file paths, "
                "priorities, and migration notes. Call this after reviewing the comparison "
                "to get actionable steps."
            ),
            inputSchema=NO_ARGS_SCHEMA,
        ),
        Tool(
            name="save_model",
            description=(
                "Persist the current domain model to the local store. Call this after "
                "applying changes and reviewing the refactoring plan."
            ),
            inputSchema=NO_ARGS_SCHEMA,
        ),
    ]


def get_all_tools() -> list[Tool]:
    return get_read_tools() + get_write_tools()


READ_TOOL_NAMES = frozenset(t.name for t in get_read_tools())
WRITE_TOOL_NAMES = frozenset(t.name for t in get_write_tools())
