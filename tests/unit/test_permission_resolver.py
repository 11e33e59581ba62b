"""Unit tests for the pure permission resolver."""

import random
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from gatekeeper.domain.entities import Permission, PermissionOverride, Role
from gatekeeper.domain.services import RolePermissions, resolve_permissions
from gatekeeper.domain.value_objects import EffectiveSource, ProvenanceSource


def _perm(name: str) -> Permission:
    resource, action = name.split(".")
    return Permission(id=uuid4(), name=name, resource=resource, action=action)


@pytest.fixture
def catalog() -> dict[str, Permission]:
    names = [
        "Product.Read",
        "Product.Create",
        "Product.Update",
        "Product.Delete",
        "Category.Read",
        "AuditLog.Read",
    ]
    return {n: _perm(n) for n in names}


@pytest.fixture
def admin_id():
    return uuid4()


def _role(name: str, *perms: Permission) -> RolePermissions:
    return RolePermissions(
        role=Role(id=uuid4(), name=name),
        permission_ids=frozenset(p.id for p in perms),
    )


def _grant(perm: Permission, actor, reason: str = "needed", at=None) -> PermissionOverride:
    return PermissionOverride.grant(uuid4(), perm.id, actor, reason, now=at)


def _deny(perm: Permission, actor, reason: str = "blocked", at=None) -> PermissionOverride:
    return PermissionOverride.deny(uuid4(), perm.id, actor, reason, now=at)


def _names(items) -> set[str]:
    return {p.name for p in items}


class TestScenarios:
    """Reference scenarios for role, grant and deny combinations."""

    def test_role_only(self, catalog) -> None:
        """Manager holds the four Product permissions and misses the rest."""
        manager = _role("Manager", *(catalog[n] for n in catalog if n.startswith("Product.")))
        result = resolve_permissions(catalog.values(), [manager], [])

        assert _names(result.effective) == {
            "Product.Read", "Product.Create", "Product.Update", "Product.Delete",
        }
        assert all(p.source is EffectiveSource.ROLE for p in result.effective)
        assert all(p.roles == ("Manager",) for p in result.effective)
        assert _names(result.missing) == {"Category.Read", "AuditLog.Read"}
        assert result.from_roles == 4
        assert result.from_direct_grants == 0

    def test_grant_adds_permission_outside_roles(self, catalog, admin_id) -> None:
        user_role = _role("User", catalog["Product.Read"])
        grant = _grant(catalog["AuditLog.Read"], admin_id, "Quarterly audit")
        result = resolve_permissions(catalog.values(), [user_role], [grant], {admin_id: "root"})

        assert _names(result.effective) == {"Product.Read", "AuditLog.Read"}
        audit = next(p for p in result.effective if p.name == "AuditLog.Read")
        assert audit.source is EffectiveSource.GRANT
        details = {p.name: p for p in result.provenance}
        assert details["AuditLog.Read"].source is ProvenanceSource.GRANTED
        assert details["AuditLog.Read"].detail == "Quarterly audit"
        assert details["AuditLog.Read"].actor_username == "root"
        assert result.from_roles == 1
        assert result.from_direct_grants == 1

    def test_deny_removes_role_permission(self, catalog, admin_id) -> None:
        manager = _role("Manager", *(catalog[n] for n in catalog if n.startswith("Product.")))
        deny = _deny(catalog["Product.Delete"], admin_id, "Deletion frozen")
        result = resolve_permissions(catalog.values(), [manager], [deny])

        assert "Product.Delete" not in _names(result.effective)
        assert "Product.Delete" in _names(result.missing)
        denied = [p for p in result.provenance if p.source is ProvenanceSource.DENIED]
        assert [p.name for p in denied] == ["Product.Delete"]
        assert denied[0].detail == "Deletion frozen"

    def test_role_grant_and_deny_combined(self, catalog, admin_id) -> None:
        """Roles plus one grant minus one deny, provenance ordered per permission."""
        user_role = _role("User", catalog["Product.Read"], catalog["Category.Read"])
        grant = _grant(catalog["Product.Create"], admin_id)
        deny = _deny(catalog["Category.Read"], admin_id)
        result = resolve_permissions(catalog.values(), [user_role], [grant, deny])

        assert _names(result.effective) == {"Product.Read", "Product.Create"}
        assert result.denied_ids == {catalog["Category.Read"].id}
        assert [(p.name, p.source) for p in result.provenance] == [
            ("Category.Read", ProvenanceSource.DENIED),
            ("Product.Create", ProvenanceSource.GRANTED),
            ("Product.Read", ProvenanceSource.ROLE),
        ]


class TestProperties:
    def test_deny_dominates_grant_and_role(self, catalog, admin_id) -> None:
        """A denied permission is never effective, whatever else applies."""
        perm = catalog["Product.Read"]
        roles = [_role("A", perm), _role("B", perm)]
        result = resolve_permissions(
            catalog.values(), roles, [_grant(perm, admin_id), _deny(perm, admin_id)]
        )
        assert perm.id not in result.effective_ids
        assert perm.id in result.denied_ids

    def test_effective_and_missing_partition_catalog(self, catalog, admin_id) -> None:
        roles = [_role("User", catalog["Product.Read"], catalog["Category.Read"])]
        overrides = [_grant(catalog["AuditLog.Read"], admin_id), _deny(catalog["Category.Read"], admin_id)]
        result = resolve_permissions(catalog.values(), roles, overrides)

        effective = result.effective_ids
        missing = {p.id for p in result.missing}
        assert effective.isdisjoint(missing)
        assert effective | missing == {p.id for p in catalog.values()}

    def test_grant_wins_source_over_role(self, catalog, admin_id) -> None:
        """A permission both role-provided and granted is reported once, as Grant."""
        perm = catalog["Product.Read"]
        result = resolve_permissions(catalog.values(), [_role("User", perm)], [_grant(perm, admin_id)])

        matching = [p for p in result.effective if p.permission_id == perm.id]
        assert len(matching) == 1
        assert matching[0].source is EffectiveSource.GRANT
        assert len(result.effective) == len(result.effective_ids)

    def test_permission_from_several_roles_lists_each_role(self, catalog) -> None:
        perm = catalog["Product.Read"]
        result = resolve_permissions(catalog.values(), [_role("Zeta", perm), _role("Alpha", perm)], [])

        assert result.effective[0].roles == ("Alpha", "Zeta")
        assert result.provenance[0].detail == "Alpha, Zeta"
        assert result.role_names == ["Alpha", "Zeta"]

    def test_result_independent_of_input_order(self, catalog, admin_id) -> None:
        roles = [
            _role("Manager", catalog["Product.Read"], catalog["Product.Update"]),
            _role("User", catalog["Product.Read"]),
        ]
        overrides = [_grant(catalog["AuditLog.Read"], admin_id), _deny(catalog["Product.Update"], admin_id)]
        expected = resolve_permissions(catalog.values(), roles, overrides)

        rng = random.Random(7)
        for _ in range(5):
            perms = list(catalog.values())
            rng.shuffle(perms)
            shuffled_roles = roles[:]
            rng.shuffle(shuffled_roles)
            shuffled_overrides = overrides[:]
            rng.shuffle(shuffled_overrides)
            assert resolve_permissions(perms, shuffled_roles, shuffled_overrides) == expected

    def test_revoked_overrides_are_ignored(self, catalog, admin_id) -> None:
        perm = catalog["Product.Read"]
        deny = _deny(perm, admin_id)
        deny.revoke(admin_id)
        result = resolve_permissions(catalog.values(), [_role("User", perm)], [deny])
        assert perm.id in result.effective_ids
        assert result.denied_ids == set()

    def test_overrides_for_unknown_permissions_are_ignored(self, catalog, admin_id) -> None:
        ghost = _perm("Ghost.Read")
        result = resolve_permissions(catalog.values(), [], [_grant(ghost, admin_id)])
        assert result.effective == []
        assert len(result.missing) == len(catalog)

    def test_no_roles_no_overrides_everything_missing(self, catalog) -> None:
        result = resolve_permissions(catalog.values(), [], [])
        assert result.effective == []
        assert result.provenance == []
        assert [p.name for p in result.missing] == [
            "AuditLog.Read", "Category.Read",
            "Product.Create", "Product.Delete", "Product.Read", "Product.Update",
        ]

    def test_override_detail_falls_back_to_actor(self, catalog, admin_id) -> None:
        grant = _grant(catalog["Product.Read"], admin_id, at=datetime.now(UTC) - timedelta(days=1))
        grant.reason = None
        result = resolve_permissions(catalog.values(), [], [grant], {admin_id: "root"})
        assert result.provenance[0].detail == "By root"
