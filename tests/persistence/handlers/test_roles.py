"""
Tests for the role cache: projections, flags, counters and paged listings.
"""

import pytest

from shopcache.domain.models.sessions import RoleSession
from shopcache.persistence.redis.redis_handler.role import RedisRoles

ROLE_ROW = {
    "id": 7,
    "name": "Admin",
    "description": "Full access",
    "default_permissions": [{"id": 1, "name": "users", "can_read": True}],
    "system_delete_protection": True,
    "created_by": {
        "id": 1,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "roles": [{"id": 7, "name": "Admin"}],
    },
    "created_at": "2024-01-01T00:00:00.000Z",
}


@pytest.fixture
def roles() -> RedisRoles:
    return RedisRoles()


class TestRoleProjection:
    @pytest.mark.asyncio
    async def test_set_and_get_by_id(self, roles, app_store):
        assert await roles.set_by_id("7", ROLE_ROW) is True

        cached = await roles.get_by_id("7")

        assert isinstance(cached, RoleSession)
        assert cached.name == "ADMIN"
        assert cached.created_by.name == "Ada Lovelace"
        assert cached.default_permissions[0].can_read is True
        assert '"systemDeleteProtection":true' in app_store.data["role:7"]

    @pytest.mark.asyncio
    async def test_name_is_normalized(self, roles, app_store):
        await roles.set_by_name("  Admin ", ROLE_ROW)
        assert "role:admin" in app_store.data
        assert (await roles.get_by_name("ADMIN")).id == "7"

        assert await roles.remove_by_name("admin") is True
        assert await roles.get_by_name("admin") is None

    @pytest.mark.asyncio
    async def test_name_trims_byte_order_mark(self, roles, app_store):
        await roles.set_by_name("\ufeffAdmin\u00a0", ROLE_ROW)
        assert "role:admin" in app_store.data
        assert (await roles.get_by_name("admin")).id == "7"

    @pytest.mark.asyncio
    async def test_remove_by_id(self, roles):
        await roles.set_by_id("7", ROLE_ROW)
        await roles.remove_by_id("7")
        assert await roles.get_by_id("7") is None


class TestRoleFlags:
    @pytest.mark.asyncio
    async def test_name_exists_flag(self, roles, app_store):
        assert await roles.name_exists("Admin") is False
        await roles.set_name_exists("Admin")
        assert app_store.data["role-exists:admin"] == '"exists"'
        assert await roles.name_exists("admin") is True
        await roles.remove_name_exists("ADMIN")
        assert await roles.name_exists("admin") is False

    @pytest.mark.asyncio
    async def test_user_count_defaults_to_zero(self, roles, app_store):
        assert await roles.get_user_count("7") == 0
        await roles.set_user_count("7", 12)
        assert await roles.get_user_count("7") == 12
        app_store.data["role-user-count:7"] = '"garbage"'
        assert await roles.get_user_count("7") == 0


class TestRoleListing:
    @pytest.mark.asyncio
    async def test_list_and_count_round_trip(self, roles, app_store):
        rows = [{"id": "1"}, {"id": "2"}]

        assert await roles.set_list_and_count(1, 10, "Adm", "createdAt", "desc", rows, 2)

        cached = await roles.get_list_and_count(1, 10, " adm ")
        assert cached.items == rows
        assert cached.count == 2
        assert cached.is_complete
        assert app_store.data["roles-count:search:adm:sort:createdAt:desc"] == '"2"'

    @pytest.mark.asyncio
    async def test_missing_count_vs_zero_count(self, roles, app_store):
        await roles.set_list(1, 10, None, "createdAt", "desc", [])

        missing = await roles.get_list_and_count(1, 10, None)
        assert missing.items == []
        assert missing.count is None
        assert not missing.is_complete

        await roles.set_count(None, "createdAt", "desc", 0)
        zero = await roles.get_list_and_count(1, 10, None)
        assert zero.count == 0
        assert zero.is_complete

    @pytest.mark.asyncio
    async def test_malformed_count(self, roles, app_store):
        app_store.data["roles-count:search:none:sort:createdAt:desc"] = '"abc"'
        assert (await roles.get_list_and_count(1, 10, None)).count is None
        assert await roles.get_count(None) == 0

    @pytest.mark.asyncio
    async def test_sequential_write(self, roles):
        ok = await roles.set_list_and_count(
            1, 10, None, "name", "asc", [{"id": "1"}], 1, concurrent=False
        )
        assert ok
        assert (await roles.get_list_and_count(1, 10, None, "name", "asc")).count == 1

    @pytest.mark.asyncio
    async def test_combined_read_issues_both_gets_at_once(self, roles, app_store):
        await roles.set_list_and_count(1, 10, None, "createdAt", "desc", [{"id": "1"}], 1)
        app_store.delay = 0.01
        app_store.max_in_flight = 0

        cached = await roles.get_list_and_count(1, 10, None)

        assert cached.count == 1
        assert [command for command, _ in app_store.calls[-2:]] == ["GET", "GET"]
        assert app_store.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_combined_write_issues_both_sets_at_once(self, roles, app_store):
        app_store.delay = 0.01

        assert await roles.set_list_and_count(1, 10, None, "createdAt", "desc", [], 0)

        assert app_store.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_sequential_write_issues_one_set_at_a_time(self, roles, app_store):
        app_store.delay = 0.01

        assert await roles.set_list_and_count(
            1, 10, None, "createdAt", "desc", [], 0, concurrent=False
        )

        assert app_store.max_in_flight == 1
        assert [command for command, _ in app_store.calls] == ["SET", "SET"]

    @pytest.mark.asyncio
    async def test_clear_all_search_cache(self, roles, app_store):
        await roles.set_by_id("7", ROLE_ROW)
        await roles.set_list_and_count(1, 10, None, "createdAt", "desc", [{"id": "7"}], 1)
        await roles.set_list_and_count(2, 10, "x", "createdAt", "desc", [], 0)

        report = await roles.clear_all_search_cache()

        assert report.deleted == {"list": 2, "count": 2}
        assert list(app_store.data) == ["role:7"]
        cached = await roles.get_list_and_count(1, 10, None)
        assert cached.items is None and cached.count is None

    @pytest.mark.asyncio
    async def test_remove_list_and_count(self, roles):
        await roles.set_list_and_count(1, 10, None, "createdAt", "desc", [], 0)
        assert await roles.remove_list_and_count(1, 10, None) is True
        assert (await roles.get_list_and_count(1, 10, None)).items is None

    @pytest.mark.asyncio
    async def test_store_down_reads_as_miss(self, roles, app_store):
        app_store.fail = True
        cached = await roles.get_list_and_count(1, 10, None)
        assert cached.items is None and cached.count is None
        assert await roles.set_list_and_count(1, 10, None, "createdAt", "desc", [], 0) is False
