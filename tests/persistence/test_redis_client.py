"""
Tests for the fork-safe store router.
"""

from unittest.mock import patch

import pytest

from shopcache.core.config.settings import Settings
from shopcache.persistence.redis.redis_client import DEFAULT_DB_MAPPING, RedisClient, validate_store


class TestValidateStore:
    @pytest.mark.parametrize("alias", ["session", "app"])
    def test_known(self, alias):
        assert validate_store(alias) == alias

    @pytest.mark.parametrize("alias", ["user-app", "", "APP"])
    def test_unknown(self, alias):
        with pytest.raises(ValueError, match="Unknown store alias"):
            validate_store(alias)


class TestRedisClient:
    def test_default_mapping(self):
        assert RedisClient().db_mapping == DEFAULT_DB_MAPPING == {"session": 0, "app": 1}

    def test_connect_is_idempotent(self):
        client = RedisClient()
        first = client.connect("session")
        assert client.connect("session") is first
        assert client.connect("app") is not first
        assert client.is_connected("session")

    def test_connect_uses_store_db(self):
        client = RedisClient(db_mapping={"app": 5})
        handle = client.connect("app")
        assert handle.connection_pool.connection_kwargs["db"] == 5
        assert handle.connection_pool.connection_kwargs["decode_responses"] is True

    def test_fork_discards_inherited_handles(self):
        client = RedisClient()
        with patch("shopcache.persistence.redis.redis_client.os.getpid", return_value=100):
            parent = client.connect("app")
        with patch("shopcache.persistence.redis.redis_client.os.getpid", return_value=200):
            assert not client.is_connected("app")
            child = client.connect("app")
        assert child is not parent

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("REDIS_HOST", "cache.internal")
        monkeypatch.setenv("REDIS_SESSION_DB", "3")
        monkeypatch.setenv("REDIS_APP_DB", "4")
        monkeypatch.setenv("REDIS_OPERATION_TIMEOUT", "0.5")
        monkeypatch.setenv("REDIS_SCAN_TIMEOUT", "12")

        client = RedisClient.from_settings(Settings())

        assert client.host == "cache.internal"
        assert client.db_mapping == {"session": 3, "app": 4}
        assert client.operation_timeout == 0.5
        assert client.scan_timeout == 12.0


class TestVerify:
    @pytest.mark.asyncio
    async def test_reachable(self, router):
        assert await router.verify("session") is True
        assert await router.verify("app") is True

    @pytest.mark.asyncio
    async def test_unreachable_never_raises(self, router, app_store):
        app_store.fail = True
        assert await router.verify("app") is False

    @pytest.mark.asyncio
    async def test_slow_store_times_out(self, router, session_store):
        session_store.delay = 0.2
        assert await router.verify("session") is False

    @pytest.mark.asyncio
    async def test_first_success_announced_once(self, router, caplog):
        with caplog.at_level("INFO", logger="RedisClient"):
            await router.verify("session")
            await router.verify("session")
        messages = [r.getMessage() for r in caplog.records]
        assert messages.count("Session Redis connected successfully.") == 1


class TestClose:
    @pytest.mark.asyncio
    async def test_closes_installed_clients(self, router, session_store, app_store):
        await router.close()
        assert session_store.closed and app_store.closed
        assert not router.is_connected("app")

    @pytest.mark.asyncio
    async def test_close_single_store(self, router, session_store, app_store):
        await router.close("session")
        assert session_store.closed
        assert not app_store.closed
        assert router.is_connected("app")
