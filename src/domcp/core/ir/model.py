"""
Domain model types for DOMCP IR.

This module contains the architectural description of a project: bounded
contexts and the entities, value objects, services, repositories and events
they own, plus cross-cutting rules.

The tree is mutable: write tools edit the live model in place. The differ
only ever reads two snapshots.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from .conventions import Conventions, TechStack


class ServiceKind(str, Enum):
    """Architectural layer a service belongs to."""

    DOMAIN = "domain"
    APPLICATION = "application"
    INFRASTRUCTURE = "infrastructure"


class Severity(str, Enum):
    """Severity of an architectural rule."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# =============================================================================
# Shared building blocks
# =============================================================================


class Field(BaseModel):
    """
    A named, typed attribute (entity field, event field, method parameter).

    The declared type is free-form text, not a resolved reference.
    Serialized with the JSON key ``type``.
    """

    name: str
    field_type: str = PydanticField(alias="type")
    required: bool = False
    description: str = ""

    model_config = ConfigDict(populate_by_name=True)


class Method(BaseModel):
    """A behaviour of an entity, service or repository."""

    name: str
    description: str = ""
    parameters: list[Field] = PydanticField(default_factory=list)
    return_type: str = ""

    def signature(self) -> str:
        """Render as ``name(p: T, ...) -> R``."""
        params = ", ".join(f"{p.name}: {p.field_type}" for p in self.parameters)
        return f"{self.name}({params}) -> {self.return_type}"


# =============================================================================
# Artifacts
# =============================================================================


class Entity(BaseModel):
    """
    Domain entity.

    Attributes:
        name: Identity key, unique (case-insensitive) within its context
        description: Free text
        aggregate_root: Whether this entity is the entry point of an aggregate
        fields: Ordered fields
        methods: Ordered methods
        invariants: Business invariants as plain sentences
    """

    name: str
    description: str = ""
    aggregate_root: bool = False
    fields: list[Field] = PydanticField(default_factory=list)
    methods: list[Method] = PydanticField(default_factory=list)
    invariants: list[str] = PydanticField(default_factory=list)


class ValueObject(BaseModel):
    """Immutable value type identified by its attributes."""

    name: str
    description: str = ""
    fields: list[Field] = PydanticField(default_factory=list)
    validation_rules: list[str] = PydanticField(default_factory=list)


class Service(BaseModel):
    """Stateless operation holder; ``kind`` classifies its layer."""

    name: str
    description: str = ""
    kind: ServiceKind = ServiceKind.DOMAIN
    methods: list[Method] = PydanticField(default_factory=list)
    dependencies: list[str] = PydanticField(default_factory=list)


class Repository(BaseModel):
    """Persistence port for an aggregate root."""

    name: str
    aggregate: str
    methods: list[Method] = PydanticField(default_factory=list)


class DomainEvent(BaseModel):
    """Something that happened in the domain, emitted by ``source``."""

    name: str
    description: str = ""
    fields: list[Field] = PydanticField(default_factory=list)
    source: str = ""


class BoundedContext(BaseModel):
    """
    Bounded context (DDD).

    Attributes:
        name: Identity key (case-insensitive)
        description: Free text
        module_path: Location hint for the context's code (e.g. "src/billing")
        dependencies: Names of the contexts this one may reference
    """

    name: str
    description: str = ""
    module_path: str = ""
    entities: list[Entity] = PydanticField(default_factory=list)
    value_objects: list[ValueObject] = PydanticField(default_factory=list)
    services: list[Service] = PydanticField(default_factory=list)
    repositories: list[Repository] = PydanticField(default_factory=list)
    events: list[DomainEvent] = PydanticField(default_factory=list)
    dependencies: list[str] = PydanticField(default_factory=list)


class ArchitecturalRule(BaseModel):
    """Cross-cutting constraint, identified by exact ``id``."""

    id: str
    description: str
    severity: Severity = Severity.ERROR
    scope: str = ""


# =============================================================================
# Root
# =============================================================================


class DomainModel(BaseModel):
    """
    Root of the architectural description of a project.

    Attributes:
        name: Project name (must be non-empty once validated)
        description: Project description
        bounded_contexts: Ordered bounded contexts
        rules: Cross-cutting architectural rules
        tech_stack: Technology stack constraints
        conventions: Naming and file layout conventions
    """

    name: str
    description: str = ""
    bounded_contexts: list[BoundedContext] = PydanticField(default_factory=list)
    rules: list[ArchitecturalRule] = PydanticField(default_factory=list)
    tech_stack: TechStack = PydanticField(default_factory=TechStack)
    conventions: Conventions = PydanticField(default_factory=Conventions)

    @classmethod
    def empty(cls, workspace_path: str) -> DomainModel:
        """Create an empty model named after the workspace directory."""
        name = PurePath(workspace_path.rstrip("/\\")).name or "Unnamed"
        return cls(name=name)

    def entity_count(self) -> int:
        return sum(len(bc.entities) for bc in self.bounded_contexts)

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize the whole model (field types under the ``type`` key)."""
        return self.model_dump_json(by_alias=True, indent=indent)
