"""
File path resolution from the conventions' path template.

A template may use three placeholders:

- ``{context}``: snake-cased bounded context name
- ``{layer}``: layer name, verbatim
- ``{type}``: snake-cased artifact name

Examples:
    >>> resolve_path("src/{context}/{layer}/{type}.rs", "Identity", "domain", "UserRole")
    'src/identity/domain/user_role.rs'
    >>> resolve_path("", "Identity", "domain", "User")
    'src/identity/domain/user.py'
"""

from __future__ import annotations

import posixpath

from .strings import to_snake

DEFAULT_PATTERN = "src/{context}/{layer}/{type}.py"

# Package module file per source extension
MODULE_FILES = {
    ".py": "__init__.py",
    ".rs": "mod.rs",
    ".ts": "index.ts",
    ".js": "index.js",
}

# Artifact kind -> layer, used when no layer is declared
KIND_LAYERS = {
    "entity": "domain",
    "value_object": "domain",
    "event": "domain",
    "service": "application",
    "repository": "infrastructure",
}


def resolve_path(pattern: str, context: str, layer: str, name: str) -> str:
    """
    Render a logical artifact location into a file path.

    Args:
        pattern: Path template; empty means DEFAULT_PATTERN
        context: Bounded context name
        layer: Layer name (used verbatim)
        name: Artifact name

    Returns:
        Relative file path
    """
    template = pattern or DEFAULT_PATTERN
    return (
        template.replace("{context}", to_snake(context))
        .replace("{layer}", layer)
        .replace("{type}", to_snake(name))
    )


def layer_for_kind(kind: str) -> str:
    """Map an artifact kind (entity, service, ...) to its layer."""
    return KIND_LAYERS.get(kind, kind)


def module_file_for(pattern: str) -> str:
    """Name of the package module file matching the template's extension."""
    ext = posixpath.splitext(pattern or DEFAULT_PATTERN)[1]
    if ext in MODULE_FILES:
        return MODULE_FILES[ext]
    return f"index{ext}" if ext else "__init__.py"


def layer_module_path(pattern: str, context: str, layer: str) -> str:
    """
    Module file of one layer of a context.

    The directory is the part of the template that holds ``{type}``.

    >>> layer_module_path("src/{context}/{layer}/{type}.rs", "Billing", "domain")
    'src/billing/domain/mod.rs'
    """
    template = pattern or DEFAULT_PATTERN
    if "{type}" in template:
        directory = template[: template.index("{type}")].rstrip("/")
    else:
        directory = posixpath.dirname(template)
    directory = directory.replace("{context}", to_snake(context)).replace("{layer}", layer)
    return posixpath.join(directory, module_file_for(template))


def context_module_path(pattern: str, context: str) -> str:
    """
    Root module file of a context.

    >>> context_module_path("src/{context}/{layer}/{type}.rs", "Billing")
    'src/billing/mod.rs'
    """
    template = pattern or DEFAULT_PATTERN
    if "{context}" in template:
        end = template.index("{context}") + len("{context}")
        root = template[:end].replace("{context}", to_snake(context))
    else:
        root = posixpath.join("src", to_snake(context))
    return posixpath.join(root, module_file_for(template))


__all__ = [
    "DEFAULT_PATTERN",
    "resolve_path",
    "layer_for_kind",
    "module_file_for",
    "layer_module_path",
    "context_module_path",
]
