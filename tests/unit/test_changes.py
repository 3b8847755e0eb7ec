"""
Unit tests for structural change detection between two domain models.

Covers:
- Reflexivity and kind symmetry
- Context, entity, service, collection and rule level changes
- Ordering and locators carried for planning
- Generic named-collection reconciliation
"""

from __future__ import annotations

import json

import pytest

from domcp.core import ir
from domcp.core.changes import diff_models, reconcile_named
from domcp.core.ir import ChangeKind, ChangeShape, ModelChange
from domcp.core.planner import plan_refactoring


def _copy(model: ir.DomainModel) -> ir.DomainModel:
    return model.model_copy(deep=True)


def _identity(model: ir.DomainModel) -> ir.BoundedContext:
    return model.bounded_contexts[0]


def _user(model: ir.DomainModel) -> ir.Entity:
    return _identity(model).entities[0]


# =============================================================================
# Properties
# =============================================================================


class TestProperties:
    """Reflexivity, purity and kind symmetry."""

    def test_diff_of_model_with_itself_is_empty(self, model: ir.DomainModel) -> None:
        assert diff_models(model, model) == []

    def test_diff_of_equal_copies_is_empty(self, model: ir.DomainModel) -> None:
        assert diff_models(model, _copy(model)) == []

    def test_empty_models(self) -> None:
        assert diff_models(ir.DomainModel(name="a"), ir.DomainModel(name="b")) == []

    def test_inputs_are_not_mutated(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields.pop()
        before_old, before_new = model.to_json(), new.to_json()

        diff_models(model, new)

        assert model.to_json() == before_old
        assert new.to_json() == before_new

    def test_kind_symmetry(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        ctx = _identity(new)
        ctx.entities.append(ir.Entity(name="Role"))
        ctx.services.clear()
        ctx.events.append(ir.DomainEvent(name="RoleGranted"))
        ctx.value_objects.append(ir.ValueObject(name="Email"))
        ctx.repositories.clear()
        ctx.dependencies.append("Billing")

        forward = {(c.kind, c.path) for c in diff_models(model, new)}
        backward = {(c.kind, c.path) for c in diff_models(new, model)}

        flipped = {
            ChangeKind.ADDED: ChangeKind.REMOVED,
            ChangeKind.REMOVED: ChangeKind.ADDED,
        }
        assert forward
        assert {(flipped[k], p) for k, p in forward} == backward

    def test_deterministic(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).entities.append(ir.Entity(name="Role"))
        new.bounded_contexts.append(ir.BoundedContext(name="Shipping"))

        first = [c.to_dict() for c in diff_models(model, new)]
        second = [c.to_dict() for c in diff_models(model, new)]
        assert first == second


# =============================================================================
# Contexts
# =============================================================================


class TestContextChanges:
    """Bounded context level changes."""

    def test_added_context(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.bounded_contexts.append(ir.BoundedContext(name="Shipping", module_path="src/shipping"))

        changes = diff_models(model, new)

        assert len(changes) == 1
        change = changes[0]
        assert change.kind == ChangeKind.ADDED
        assert change.path == "bounded_contexts.Shipping"
        assert change.after == {"name": "Shipping", "module": "src/shipping"}
        assert change.before is None
        assert change.shape == ChangeShape.CONTEXT
        assert change.context == "Shipping"

    def test_removed_context(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.bounded_contexts.pop()

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.REMOVED, "bounded_contexts.Billing")
        ]
        assert changes[0].before == {"name": "Billing"}

    def test_context_match_is_case_insensitive(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).name = "IDENTITY"
        assert diff_models(model, new) == []

    def test_rename_is_removal_plus_addition(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).name = "Auth"

        kinds = [(c.kind, c.path) for c in diff_models(model, new)]

        assert (ChangeKind.ADDED, "bounded_contexts.Auth") in kinds
        assert (ChangeKind.REMOVED, "bounded_contexts.Identity") in kinds

    def test_module_path_moved(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).module_path = "src/auth"

        changes = diff_models(model, new)

        assert len(changes) == 1
        change = changes[0]
        assert change.kind == ChangeKind.MOVED
        assert change.path == "Identity.module_path"
        assert change.before == "src/identity"
        assert change.after == "src/auth"
        assert change.shape == ChangeShape.CONTEXT_MODULE_PATH

    def test_cleared_module_path_is_not_a_move(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).module_path = ""
        assert diff_models(model, new) == []

    def test_dependencies(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.bounded_contexts[1].dependencies = ["identity", "Shipping"]

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.ADDED, "Billing.dependencies.Shipping")
        ]
        assert changes[0].shape == ChangeShape.CONTEXT_DEPENDENCY
        assert changes[0].member == "Shipping"

    def test_removed_dependency(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.bounded_contexts[1].dependencies = []

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.REMOVED, "Billing.dependencies.Identity")
        ]


# =============================================================================
# Collections
# =============================================================================


class TestCollectionChanges:
    """Entities, services, events, value objects and repositories."""

    def test_new_entity(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).entities.append(ir.Entity(name="Role"))

        changes = diff_models(model, new)

        assert len(changes) == 1
        change = changes[0]
        assert change.kind == ChangeKind.ADDED
        assert "Role" in change.path
        assert change.path == "Identity.entities.Role"
        assert change.after["name"] == "Role"
        assert change.shape == ChangeShape.ENTITY
        assert (change.context, change.artifact) == ("Identity", "Role")

    def test_removed_entity(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).entities.clear()

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.REMOVED, "Identity.entities.User")
        ]
        assert changes[0].before["name"] == "User"
        assert changes[0].after is None

    @pytest.mark.parametrize(
        "collection,item,shape",
        [
            ("services", ir.Service(name="TokenService"), ChangeShape.SERVICE),
            ("events", ir.DomainEvent(name="UserDeleted"), ChangeShape.EVENT),
            ("value_objects", ir.ValueObject(name="Email"), ChangeShape.VALUE_OBJECT),
            (
                "repositories",
                ir.Repository(name="RoleRepository", aggregate="Role"),
                ChangeShape.REPOSITORY,
            ),
        ],
    )
    def test_added_sibling_collections(
        self,
        model: ir.DomainModel,
        collection: str,
        item: object,
        shape: ChangeShape,
    ) -> None:
        new = _copy(model)
        getattr(_identity(new), collection).append(item)

        changes = diff_models(model, new)

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.ADDED
        assert changes[0].path == f"Identity.{collection}.{item.name}"
        assert changes[0].shape == shape

    def test_entity_field_serialized_with_type_key(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields.append(ir.Field(name="locale", field_type="Locale"))

        change = diff_models(model, new)[0]

        assert change.after == {
            "name": "locale",
            "type": "Locale",
            "required": False,
            "description": "",
        }


# =============================================================================
# Entities
# =============================================================================


class TestEntityChanges:
    """Per-entity diff: aggregate root, fields and invariants."""

    def test_field_type_change(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields[0].field_type = "Uuid"

        changes = diff_models(model, new)

        assert len(changes) == 1
        change = changes[0]
        assert change.kind == ChangeKind.MODIFIED
        assert change.path.endswith("fields.id")
        assert change.path == "Identity.User.fields.id"
        assert (change.before, change.after) == ("UserId", "Uuid")
        assert change.shape == ChangeShape.ENTITY_FIELD
        assert (change.artifact, change.member) == ("User", "id")

    def test_field_type_comparison_is_exact(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields[0].field_type = "userid"
        assert len(diff_models(model, new)) == 1

    def test_field_other_attributes_ignored(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields[0].required = False
        _user(new).fields[0].description = "changed"
        assert diff_models(model, new) == []

    def test_removed_field(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields = [f for f in _user(new).fields if f.name != "avatar"]

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.REMOVED, "Identity.User.fields.avatar")
        ]

    def test_added_field(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).fields.append(ir.Field(name="locale", field_type="Locale"))

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.ADDED, "Identity.User.fields.locale")
        ]

    def test_aggregate_root_flip(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).aggregate_root = False

        changes = diff_models(model, new)

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.MODIFIED
        assert changes[0].path == "Identity.User.aggregate_root"
        assert (changes[0].before, changes[0].after) == (True, False)
        assert changes[0].shape == ChangeShape.ENTITY_AGGREGATE_ROOT

    def test_added_invariant(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).invariants.append("Email must be verified")

        changes = diff_models(model, new)

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.ADDED
        assert changes[0].path == "Identity.User.invariants"
        assert changes[0].after == "Email must be verified"

    def test_removed_invariant_is_not_reported(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).invariants.clear()
        assert diff_models(model, new) == []

    def test_description_change_is_not_reported(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _user(new).description = "Someone who signs in"
        assert diff_models(model, new) == []


# =============================================================================
# Services
# =============================================================================


class TestServiceChanges:
    """Per-service diff: kind, methods and dependencies."""

    def _service(self, model: ir.DomainModel) -> ir.Service:
        return _identity(model).services[0]

    def test_kind_change(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        self._service(new).kind = ir.ServiceKind.DOMAIN

        changes = diff_models(model, new)

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.MODIFIED
        assert changes[0].path == "Identity.services.AuthService.kind"
        assert (changes[0].before, changes[0].after) == ("application", "domain")

    def test_methods_added_and_removed(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        self._service(new).methods = [ir.Method(name="logout")]

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.ADDED, "Identity.services.AuthService.methods.logout"),
            (ChangeKind.REMOVED, "Identity.services.AuthService.methods.login"),
        ]

    def test_method_signature_change_is_not_reported(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        method = self._service(new).methods[0]
        method.return_type = "Token"
        method.parameters.append(ir.Field(name="otp", field_type="str"))
        assert diff_models(model, new) == []

    def test_dependencies(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        self._service(new).dependencies = ["UserRepository"]

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.ADDED, "Identity.services.AuthService.dependencies.UserRepository")
        ]


# =============================================================================
# Rules
# =============================================================================


class TestRuleChanges:
    """Architectural rules are matched by exact id."""

    def test_added_and_removed(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.rules = [ir.ArchitecturalRule(id="NAMING-001", description="PascalCase")]

        changes = diff_models(model, new)

        assert [(c.kind, c.path) for c in changes] == [
            (ChangeKind.ADDED, "rules.NAMING-001"),
            (ChangeKind.REMOVED, "rules.LAYER-001"),
        ]

    def test_id_match_is_case_sensitive(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.rules[0].id = "layer-001"

        kinds = sorted(c.kind.value for c in diff_models(model, new))
        assert kinds == ["added", "removed"]

    @pytest.mark.parametrize(
        "attr,value",
        [("description", "Domain is pure"), ("severity", ir.Severity.WARNING)],
    )
    def test_modified(self, model: ir.DomainModel, attr: str, value: object) -> None:
        new = _copy(model)
        setattr(new.rules[0], attr, value)

        changes = diff_models(model, new)

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.MODIFIED
        assert changes[0].path == "rules.LAYER-001"
        assert changes[0].before["id"] == "LAYER-001"

    def test_scope_change_is_not_reported(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.rules[0].scope = "everything"
        assert diff_models(model, new) == []


# =============================================================================
# Ordering and serialization
# =============================================================================


class TestOrdering:
    """Traversal order and wire shape."""

    def test_context_subchanges_are_contiguous(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        ctx = _identity(new)
        ctx.module_path = "src/auth"
        ctx.entities.append(ir.Entity(name="Role"))
        ctx.services.append(ir.Service(name="TokenService"))
        ctx.dependencies.append("Billing")
        new.bounded_contexts[1].entities.append(ir.Entity(name="Invoice"))
        new.rules.append(ir.ArchitecturalRule(id="R2", description="x"))

        paths = [c.path for c in diff_models(model, new)]

        assert paths == [
            "Identity.module_path",
            "Identity.entities.Role",
            "Identity.services.TokenService",
            "Identity.dependencies.Billing",
            "Billing.entities.Invoice",
            "rules.R2",
        ]

    def test_removed_contexts_follow_matched_ones(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        new.bounded_contexts = [
            ir.BoundedContext(name="Shipping"),
            new.bounded_contexts[1],
        ]

        paths = [c.path for c in diff_models(model, new)]

        assert paths == ["bounded_contexts.Shipping", "bounded_contexts.Identity"]

    def test_rules_added_then_removed_then_modified(self) -> None:
        old = ir.DomainModel(
            name="P",
            rules=[
                ir.ArchitecturalRule(id="R0", description="zero"),
                ir.ArchitecturalRule(id="R1", description="one"),
            ],
        )
        new = ir.DomainModel(
            name="P",
            rules=[
                ir.ArchitecturalRule(id="R1", description="one, revised"),
                ir.ArchitecturalRule(id="R2", description="two"),
            ],
        )

        changes = [(c.kind, c.path) for c in diff_models(old, new)]

        assert changes == [
            (ChangeKind.ADDED, "rules.R2"),
            (ChangeKind.REMOVED, "rules.R0"),
            (ChangeKind.MODIFIED, "rules.R1"),
        ]

    def test_fields_added_then_removed_then_type_changed(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        user = _identity(new).entities[0]
        user.fields[0].field_type = "Uuid"
        user.fields = [f for f in user.fields if f.name != "avatar"]
        user.fields.append(ir.Field(name="phone", field_type="Phone"))

        changes = [(c.kind, c.path) for c in diff_models(model, new)]

        assert changes == [
            (ChangeKind.ADDED, "Identity.User.fields.phone"),
            (ChangeKind.REMOVED, "Identity.User.fields.avatar"),
            (ChangeKind.MODIFIED, "Identity.User.fields.id"),
        ]

    def test_to_dict_omits_missing_side_and_internal_tags(self, model: ir.DomainModel) -> None:
        new = _copy(model)
        _identity(new).entities.append(ir.Entity(name="Role"))

        data = diff_models(model, new)[0].to_dict()

        assert set(data) == {"kind", "path", "description", "after"}
        assert data["kind"] == "added"


class TestFromDict:
    """Changes rebuilt from their wire form."""

    def _every_shape(self, model: ir.DomainModel) -> list[ModelChange]:
        new = _copy(model)
        ctx = _identity(new)
        ctx.module_path = "src/auth"
        ctx.dependencies.append("Billing")
        user = _user(new)
        user.aggregate_root = False
        user.fields[0].field_type = "Uuid"
        user.invariants.append("Name is required")
        svc = ctx.services[0]
        svc.kind = ir.ServiceKind.DOMAIN
        svc.methods.append(ir.Method(name="logout"))
        svc.dependencies.append("Clock")
        ctx.value_objects.append(ir.ValueObject(name="Email"))
        ctx.repositories.append(ir.Repository(name="RoleRepository", aggregate="Role"))
        ctx.events.append(ir.DomainEvent(name="UserDeleted"))
        new.bounded_contexts.append(ir.BoundedContext(name="Shipping"))
        new.rules[0].description = "Revised"
        return diff_models(model, new)

    def test_round_trip_restores_locators(self, model: ir.DomainModel) -> None:
        changes = self._every_shape(model)

        rebuilt = [ModelChange.from_dict(c.to_dict()) for c in changes]

        assert {c.shape for c in changes} >= {
            ChangeShape.CONTEXT,
            ChangeShape.CONTEXT_MODULE_PATH,
            ChangeShape.CONTEXT_DEPENDENCY,
            ChangeShape.ENTITY_AGGREGATE_ROOT,
            ChangeShape.ENTITY_FIELD,
            ChangeShape.ENTITY_INVARIANT,
            ChangeShape.SERVICE_KIND,
            ChangeShape.SERVICE_METHOD,
            ChangeShape.SERVICE_DEPENDENCY,
            ChangeShape.VALUE_OBJECT,
            ChangeShape.REPOSITORY,
            ChangeShape.EVENT,
            ChangeShape.RULE,
        }
        assert rebuilt == changes

    def test_plan_from_serialized_changes(
        self, model: ir.DomainModel, rust_conventions: ir.Conventions
    ) -> None:
        changes = self._every_shape(model)
        wire = json.loads(json.dumps([c.to_dict() for c in changes]))

        rebuilt = [ModelChange.from_dict(item) for item in wire]

        assert plan_refactoring(rebuilt, rust_conventions) == plan_refactoring(
            changes, rust_conventions
        )

    def test_unknown_path(self) -> None:
        with pytest.raises(ValueError, match="Unrecognized change path"):
            ModelChange.from_dict({"kind": "added", "path": "nowhere", "description": "d"})


# =============================================================================
# reconcile_named
# =============================================================================


class TestReconcileNamed:
    """The generic named-collection reconciliation routine."""

    def _run(self, old: list[str], new: list[str], ignore_case: bool = True) -> list[tuple]:
        events: list[tuple] = []
        reconcile_named(
            old,
            new,
            key=lambda s: s,
            on_added=lambda s: events.append(("added", s)),
            on_removed=lambda s: events.append(("removed", s)),
            on_matched=lambda o, n: events.append(("matched", o, n)),
            ignore_case=ignore_case,
        )
        return events

    def test_new_order_then_removed(self) -> None:
        assert self._run(["a", "b", "c"], ["c", "d", "a"]) == [
            ("matched", "c", "c"),
            ("added", "d"),
            ("matched", "a", "a"),
            ("removed", "b"),
        ]

    def test_case_insensitive_by_default(self) -> None:
        assert self._run(["User"], ["user"]) == [("matched", "User", "user")]

    def test_case_sensitive(self) -> None:
        assert self._run(["User"], ["user"], ignore_case=False) == [
            ("added", "user"),
            ("removed", "User"),
        ]

    def test_first_old_item_wins_on_duplicate_keys(self) -> None:
        assert self._run(["A", "a"], ["a"]) == [("matched", "A", "a")]

    def test_without_matched_callback(self) -> None:
        events: list[str] = []
        reconcile_named(
            ["x"],
            ["x", "y"],
            key=str,
            on_added=events.append,
            on_removed=events.append,
        )
        assert events == ["y"]
