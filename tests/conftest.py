"""Shared pytest fixtures for DOMCP tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from domcp.core import ir
from domcp.core.store import ModelStore

RUST_PATTERN = "src/{context}/{layer}/{type}.rs"


def make_model() -> ir.DomainModel:
    """Two-context model: Identity (User aggregate, AuthService) and Billing."""
    return ir.DomainModel(
        name="TestProject",
        description="Test",
        bounded_contexts=[
            ir.BoundedContext(
                name="Identity",
                description="Auth context",
                module_path="src/identity",
                entities=[
                    ir.Entity(
                        name="User",
                        description="A user",
                        aggregate_root=True,
                        fields=[
                            ir.Field(name="id", field_type="UserId", required=True),
                            ir.Field(name="email", field_type="Email", required=True),
                            ir.Field(name="avatar", field_type="Url"),
                        ],
                        invariants=["Email must be unique"],
                    )
                ],
                services=[
                    ir.Service(
                        name="AuthService",
                        description="Handles auth",
                        kind=ir.ServiceKind.APPLICATION,
                        methods=[
                            ir.Method(
                                name="login",
                                parameters=[ir.Field(name="email", field_type="Email")],
                                return_type="Session",
                            )
                        ],
                    )
                ],
                events=[ir.DomainEvent(name="UserRegistered", source="User")],
                repositories=[ir.Repository(name="UserRepository", aggregate="User")],
            ),
            ir.BoundedContext(
                name="Billing",
                description="Billing context",
                module_path="src/billing",
                dependencies=["Identity"],
            ),
        ],
        rules=[
            ir.ArchitecturalRule(
                id="LAYER-001",
                description="Domain must not depend on infra",
                severity=ir.Severity.ERROR,
                scope="domain",
            )
        ],
        conventions=ir.Conventions(
            file_structure=ir.FileStructure(
                pattern=RUST_PATTERN,
                layers=["domain", "application"],
            )
        ),
    )


@pytest.fixture
def model() -> ir.DomainModel:
    """A fresh, mutable sample model."""
    return make_model()


@pytest.fixture
def rust_conventions() -> ir.Conventions:
    return ir.Conventions(
        file_structure=ir.FileStructure(pattern=RUST_PATTERN, layers=["domain", "application"])
    )


@pytest.fixture
def store() -> Iterator[ModelStore]:
    """In-memory model store."""
    s = ModelStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def model_file(tmp_path: Path, model: ir.DomainModel) -> Path:
    """The sample model written as a JSON file."""
    path = tmp_path / "domcp.json"
    path.write_text(model.to_json())
    return path
