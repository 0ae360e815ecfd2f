"""
Tests for the permission cache.
"""

from types import SimpleNamespace

import pytest

from shopcache.domain.models.sessions import PermissionSession, RoleSummary
from shopcache.persistence.redis.redis_handler.permission import RedisPermissions


@pytest.fixture
def permissions() -> RedisPermissions:
    return RedisPermissions()


class TestUserPermissions:
    @pytest.mark.asyncio
    async def test_from_user_with_permissions(self, permissions, app_store):
        user = {
            "id": "3",
            "permissions": [
                {"id": 1, "name": "orders", "canRead": True},
                {"id": 2, "name": "users", "can_delete": True},
            ],
        }
        assert await permissions.set_user_permissions("3", user) is True

        cached = await permissions.get_user_permissions("3")

        assert [p.name for p in cached] == ["orders", "users"]
        assert cached[0].can_read is True
        assert cached[1].can_delete is True
        assert "permissions:user:3" in app_store.data

    @pytest.mark.asyncio
    async def test_from_single_permission(self, permissions):
        permission = SimpleNamespace(id=5, name="products", can_create=True)
        await permissions.set_user_permissions("3", permission)

        cached = await permissions.get_user_permissions("3")

        assert cached == [PermissionSession(id="5", name="products", can_create=True)]

    @pytest.mark.asyncio
    async def test_unrecognized_payload_is_not_cached(self, permissions, app_store):
        assert await permissions.set_user_permissions("3", {"foo": "bar"}) is False
        assert app_store.data == {}

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_a_miss(self, permissions, app_store):
        app_store.data["permissions:user:3"] = '{"not":"a list"}'
        assert await permissions.get_user_permissions("3") is None
        app_store.data["permissions:user:3"] = '[{"noId":true}]'
        assert await permissions.get_user_permissions("3") is None

    @pytest.mark.asyncio
    async def test_remove(self, permissions):
        await permissions.set_user_permissions("3", {"permissions": []})
        assert await permissions.get_user_permissions("3") == []
        await permissions.remove_user_permissions("3")
        assert await permissions.get_user_permissions("3") is None


class TestRolesInfo:
    @pytest.mark.asyncio
    async def test_round_trip(self, permissions, app_store):
        await permissions.set_user_roles_info("3", [{"id": 7, "name": "ADMIN"}])

        cached = await permissions.get_user_roles_info("3")

        assert cached == [RoleSummary(id="7", name="ADMIN")]
        assert "user:roles:info:3" in app_store.data

        await permissions.remove_user_roles_info("3")
        assert await permissions.get_user_roles_info("3") is None


class TestRolePermissions:
    @pytest.mark.asyncio
    async def test_round_trip(self, permissions, app_store):
        links = [{"roleId": "7", "permissionId": "1", "canRead": True}]
        await permissions.set_role_permissions("7", links)

        assert await permissions.get_role_permissions("7") == links
        assert "role_permissions:7" in app_store.data

        await permissions.remove_role_permissions("7")
        assert await permissions.get_role_permissions("7") is None

    @pytest.mark.asyncio
    async def test_non_list_is_a_miss(self, permissions, app_store):
        app_store.data["role_permissions:7"] = '"oops"'
        assert await permissions.get_role_permissions("7") is None
