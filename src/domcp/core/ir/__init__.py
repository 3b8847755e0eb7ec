"""
DOMCP Internal Representation (IR).

The IR is the typed architectural description of a project, plus the change
and plan types produced when two versions of it are compared.
"""

from .changes import (
    ActionKind,
    ChangeKind,
    ChangeShape,
    CodeAction,
    ModelChange,
    Priority,
    RefactoringPlan,
)
from .conventions import Conventions, FileStructure, NamingConventions, TechStack
from .model import (
    ArchitecturalRule,
    BoundedContext,
    DomainEvent,
    DomainModel,
    Entity,
    Field,
    Method,
    Repository,
    Service,
    ServiceKind,
    Severity,
    ValueObject,
)

__all__ = [
    # Model
    "DomainModel",
    "BoundedContext",
    "Entity",
    "ValueObject",
    "Service",
    "ServiceKind",
    "Repository",
    "DomainEvent",
    "Field",
    "Method",
    "ArchitecturalRule",
    "Severity",
    # Conventions
    "TechStack",
    "Conventions",
    "NamingConventions",
    "FileStructure",
    # Changes and plans
    "ChangeKind",
    "ChangeShape",
    "ModelChange",
    "ActionKind",
    "Priority",
    "CodeAction",
    "RefactoringPlan",
]
