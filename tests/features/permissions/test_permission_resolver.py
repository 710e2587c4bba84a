"""Tests for permission resolution."""

import pytest

from neo_access.core.exceptions import StoreError
from neo_access.features.permissions import (
    CATEGORY_FLAGS,
    DEFAULT_GROUPS,
    CapabilitySet,
    CapabilitySource,
    PermissionGroup,
    PermissionResolver,
    merge_overrides,
)
from neo_access.features.users import UserAccount

TEAM_MEMBER = next(template for template in DEFAULT_GROUPS if template.name == "Team Member")


@pytest.fixture
def resolver(store, role_model):
    return PermissionResolver(store, role_model)


async def add_group(store, group_id="g-member", tenant_id="T1", template=TEAM_MEMBER):
    group = PermissionGroup(
        id=group_id,
        name=template.name,
        tenant_id=tenant_id,
        permissions=template.permissions,
    )
    await store.set("permission_groups", group_id, group.to_document())
    return group


class TestMergeOverrides:
    """Test per-flag override merging."""

    @pytest.mark.parametrize(
        "category, name",
        [(category.value, name) for category, names in CATEGORY_FLAGS.items() for name in names],
    )
    def test_single_override_leaves_everything_else_untouched(self, category, name):
        base = TEAM_MEMBER.permissions
        merged = merge_overrides(base, {category: {name: not base[category][name]}})

        assert merged[category][name] is (not base[category][name])
        for other_category, flags in base.items():
            for other_name, value in flags.items():
                if (other_category, other_name) != (category, name):
                    assert merged[other_category][other_name] == value

    def test_base_is_not_mutated(self):
        before = TEAM_MEMBER.permissions["taskAccess"]["delete"]
        merge_overrides(TEAM_MEMBER.permissions, {"taskAccess": {"delete": not before}})
        assert TEAM_MEMBER.permissions["taskAccess"]["delete"] == before

    def test_unknown_keys_are_ignored(self):
        merged = merge_overrides(
            TEAM_MEMBER.permissions,
            {"madeUp": {"x": True}, "taskAccess": {"teleport": True}, "viewAccess": "all"},
        )
        assert merged == TEAM_MEMBER.permissions


class TestPermissionResolver:
    """Test the group, legacy and empty resolution paths."""

    @pytest.mark.asyncio
    async def test_group_with_custom_override(self, resolver, store):
        await add_group(store)
        user = UserAccount(
            id="u1",
            role="usuario_base",
            tenant_id="T1",
            permission_group_id="g-member",
            custom_permissions={"taskAccess": {"delete": True}},
        )

        caps = await resolver.resolve_for(user)

        assert caps.source == CapabilitySource.GROUP
        assert caps.permission_group_id == "g-member"
        assert caps.can("delete", "tasks")
        assert caps.can("create", "tasks")
        assert caps.can("edit", "tasks")
        assert not caps.can("create", "projects")
        assert caps.can_view("dashboard")
        assert not caps.can_view("userManagement")

    @pytest.mark.asyncio
    async def test_legacy_table_without_group(self, resolver):
        caps = await resolver.resolve_for(UserAccount(id="u1", role="global_pm", tenant_id="T1"))

        assert caps.source == CapabilitySource.LEGACY
        assert caps.can("create", "projects")
        assert not caps.can("view_all", "users")
        assert caps.unrestricted
        assert caps.get_allowed_resource_ids() == []

    @pytest.mark.asyncio
    async def test_unmapped_role_gets_restrictive_defaults(self, resolver):
        user = UserAccount(id="u1", role="usuario_externo", tenant_id="T1", assigned_resource_ids=["p1", "p2"])

        caps = await resolver.resolve_for(user)

        assert caps.source == CapabilitySource.DEFAULT
        assert caps.can("view", "projects")
        assert not caps.can("create", "tasks")
        assert not caps.unrestricted
        assert caps.get_allowed_resource_ids() == ["p1", "p2"]
        assert caps.allows_resource("p1")
        assert not caps.allows_resource("p3")

    @pytest.mark.asyncio
    async def test_top_tier_bypasses_flags(self, resolver):
        caps = await resolver.resolve_for(UserAccount(id="root", role="superadmin"))

        assert caps.is_top_tier()
        assert caps.can("delete", "tasks")
        assert caps.can("manage", "permissions")
        assert caps.can_view("userManagement")
        assert caps.get_allowed_resource_ids() == []

    @pytest.mark.asyncio
    async def test_missing_profile_allows_nothing(self, resolver):
        caps = await resolver.resolve_for_user_id("ghost")

        assert caps.source == CapabilitySource.NONE
        assert not caps.can("view", "tasks")
        assert not caps.can_view("dashboard")
        assert not caps.is_top_tier()
        assert await resolver.resolve_for(None) == CapabilitySet.none()

    @pytest.mark.asyncio
    async def test_resolves_stored_profile_with_legacy_fields(self, resolver, store):
        await add_group(store)
        await store.set(
            "user",
            "legacy-1",
            {"role": "consultor", "tenantId": "T1", "permissionGroupId": "g-member", "assignedProjectIds": ["p9"]},
        )

        caps = await resolver.resolve_for_user_id("legacy-1")

        assert caps.source == CapabilitySource.GROUP
        assert caps.get_allowed_resource_ids() == ["p9"]

    @pytest.mark.asyncio
    async def test_group_from_another_tenant_is_ignored(self, resolver, store):
        await add_group(store, tenant_id="T2")
        user = UserAccount(id="u1", role="usuario_base", tenant_id="T1", permission_group_id="g-member")

        caps = await resolver.resolve_for(user)

        assert caps.source == CapabilitySource.LEGACY
        assert caps.permission_group_id is None

    @pytest.mark.asyncio
    async def test_missing_group_falls_back_to_role(self, resolver):
        user = UserAccount(id="u1", role="app_admin", tenant_id="T1", permission_group_id="gone")
        caps = await resolver.resolve_for(user)
        assert caps.source == CapabilitySource.LEGACY
        assert caps.can("manage", "permissions")

    @pytest.mark.asyncio
    async def test_store_failure_falls_back_to_role(self, store, role_model, mocker):
        mocker.patch.object(store, "get", side_effect=StoreError("connection reset"))
        resolver = PermissionResolver(store, role_model)
        user = UserAccount(id="u1", role="usuario_base", tenant_id="T1", permission_group_id="g-member")

        caps = await resolver.resolve_for(user)

        assert caps.source == CapabilitySource.LEGACY
        assert await resolver.resolve_for_user_id("u1") == CapabilitySet.none()


class TestCapabilitySet:
    """Test capability set behavior."""

    def test_flags_are_frozen(self):
        caps = CapabilitySet(flags=TEAM_MEMBER.permissions)
        with pytest.raises(TypeError):
            caps.flags["taskAccess"]["delete"] = True

    def test_unknown_actions_are_denied(self):
        caps = CapabilitySet(flags=TEAM_MEMBER.permissions)
        assert not caps.can("launch", "rockets")

    def test_to_dict(self):
        caps = CapabilitySet(flags=TEAM_MEMBER.permissions, source=CapabilitySource.GROUP, role="usuario_base")
        data = caps.to_dict()
        assert data["source"] == "group"
        assert data["topTier"] is False
        assert set(data["permissions"]) == {category.value for category in CATEGORY_FLAGS}
