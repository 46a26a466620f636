"""
Tests for Cache Backends

Tests the in-memory and Redis backends behind ScoreCache.
"""
import time
from unittest.mock import Mock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from campus_match.cache import RedisCacheBackend
from tests import TEST_REDIS_URL


class TestInMemoryCacheBackend:

    def test_01_set_and_get(self, memory_backend):
        memory_backend.set_with_ttl("k", "v", 60)
        assert memory_backend.get("k") == "v"

    def test_02_missing_key(self, memory_backend):
        assert memory_backend.get("nope") is None

    def test_03_expiry(self, memory_backend, fake_clock):
        memory_backend.set_with_ttl("k", "v", 60)

        fake_clock.advance(59)
        assert memory_backend.get("k") == "v"

        fake_clock.advance(1)
        assert memory_backend.get("k") is None

    def test_04_overwrite_resets_ttl(self, memory_backend, fake_clock):
        memory_backend.set_with_ttl("k", "old", 60)
        fake_clock.advance(50)
        memory_backend.set_with_ttl("k", "new", 60)
        fake_clock.advance(50)

        assert memory_backend.get("k") == "new"

    def test_05_delete(self, memory_backend):
        memory_backend.set_with_ttl("k", "v", 60)

        assert memory_backend.delete("k") == 1
        assert memory_backend.delete("k") == 0
        assert memory_backend.get("k") is None

    def test_06_delete_and_count_by_prefix(self, memory_backend, fake_clock):
        memory_backend.set_with_ttl("scores:r1:j1", "a", 60)
        memory_backend.set_with_ttl("scores:r1:j2", "b", 60)
        memory_backend.set_with_ttl("scores:r2:j1", "c", 60)
        memory_backend.set_with_ttl("scores:r2:j2", "d", 5)

        fake_clock.advance(5)
        assert memory_backend.count_by_prefix("scores:") == 3

        assert memory_backend.delete_by_prefix("scores:r1:") == 2
        assert memory_backend.get("scores:r2:j1") == "c"

    def test_07_always_available(self, memory_backend):
        assert memory_backend.is_available is True


class TestRedisCacheBackend:
    """RedisCacheBackend with a mocked client."""

    @pytest.fixture
    def mock_redis(self):
        mock = Mock()
        mock.ping.return_value = True
        mock.get.return_value = None
        mock.delete.return_value = 1
        mock.scan.return_value = (0, [])
        return mock

    def test_08_from_url(self, mock_redis):
        with patch('campus_match.cache.backend.Redis') as mock_redis_class:
            mock_redis_class.from_url.return_value = mock_redis

            backend = RedisCacheBackend(
                "redis://localhost:6379/0",
                password="testpass",
                socket_timeout=1.5,
                connect_timeout=0.5
            )

            mock_redis_class.from_url.assert_called_once_with(
                "redis://localhost:6379/0",
                password="testpass",
                decode_responses=True,
                socket_connect_timeout=0.5,
                socket_timeout=1.5
            )
            assert backend.is_available is True

    def test_09_set_with_ttl_uses_setex(self, mock_redis):
        RedisCacheBackend(client=mock_redis).set_with_ttl("k", "v", 3600)
        mock_redis.setex.assert_called_once_with("k", 3600, "v")

    def test_10_scan_follows_cursor(self, mock_redis):
        mock_redis.scan.side_effect = [
            (17, ["scores:r1:j1", "scores:r1:j2"]),
            (42, []),
            (0, ["scores:r1:j3"]),
        ]
        mock_redis.delete.side_effect = [2, 1]

        deleted = RedisCacheBackend(client=mock_redis).delete_by_prefix("scores:r1:")

        assert deleted == 3
        assert mock_redis.scan.call_count == 3
        assert mock_redis.scan.call_args_list[1].kwargs["cursor"] == 17
        mock_redis.delete.assert_any_call("scores:r1:j1", "scores:r1:j2")
        mock_redis.delete.assert_any_call("scores:r1:j3")

    def test_11_count_by_prefix(self, mock_redis):
        mock_redis.scan.return_value = (0, [f"scores:{i}:j" for i in range(25)])
        assert RedisCacheBackend(client=mock_redis).count_by_prefix("scores:") == 25

    def test_12_errors_propagate(self, mock_redis):
        mock_redis.get.side_effect = Exception("Redis error")

        with pytest.raises(Exception):
            RedisCacheBackend(client=mock_redis).get("k")

    def test_13_is_available_ping_failure(self, mock_redis):
        mock_redis.ping.side_effect = Exception("Ping failed")
        assert RedisCacheBackend(client=mock_redis).is_available is False


class TestRedisCacheBackendAvailability:
    """Unavailable marking and rechecks, with a mocked client."""

    @pytest.fixture
    def mock_redis(self):
        mock = Mock()
        mock.ping.return_value = True
        mock.get.return_value = "cached"
        mock.scan.return_value = (0, [])
        return mock

    @pytest.fixture
    def backend(self, mock_redis, fake_clock):
        return RedisCacheBackend(client=mock_redis, recheck_interval=30, clock=fake_clock)

    def test_16_marked_unavailable_reads_miss_without_redis(self, backend, mock_redis):
        backend.mark_unavailable()

        assert backend.get("k") is None
        mock_redis.get.assert_not_called()
        mock_redis.ping.assert_not_called()

    def test_17_marked_unavailable_writes_raise(self, backend, mock_redis):
        backend.mark_unavailable()

        with pytest.raises(RedisConnectionError):
            backend.set_with_ttl("k", "v", 60)
        with pytest.raises(RedisConnectionError):
            backend.delete_by_prefix("scores:r1:")
        mock_redis.setex.assert_not_called()
        mock_redis.scan.assert_not_called()

    def test_18_recheck_after_interval_restores(self, backend, mock_redis, fake_clock):
        backend.mark_unavailable()
        fake_clock.advance(29)
        assert backend.get("k") is None
        mock_redis.ping.assert_not_called()

        fake_clock.advance(1)

        assert backend.get("k") == "cached"
        mock_redis.ping.assert_called_once()
        mock_redis.get.assert_called_once_with("k")

    def test_19_failed_recheck_waits_another_interval(self, backend, mock_redis, fake_clock):
        mock_redis.ping.side_effect = RedisConnectionError("Connection refused")
        backend.mark_unavailable()

        fake_clock.advance(30)
        assert backend.get("k") is None
        fake_clock.advance(10)
        assert backend.get("k") is None

        assert mock_redis.ping.call_count == 1
        mock_redis.get.assert_not_called()

    def test_20_connection_error_marks_unavailable(self, backend, mock_redis):
        mock_redis.get.side_effect = RedisConnectionError("Connection reset by peer")

        with pytest.raises(RedisConnectionError):
            backend.get("k")

        assert backend.get("k") is None
        assert mock_redis.get.call_count == 1

    def test_21_other_errors_leave_backend_available(self, backend, mock_redis):
        mock_redis.get.side_effect = [Exception("WRONGTYPE"), "cached"]

        with pytest.raises(Exception):
            backend.get("k")

        assert backend.get("k") == "cached"

    def test_22_prefix_glob_characters_escaped(self, backend, mock_redis):
        backend.count_by_prefix("scores:a*b?[c]\\d:")

        mock_redis.scan.assert_called_once_with(
            cursor=0, match="scores:a\\*b\\?\\[c\\]\\\\d:*", count=100
        )


@pytest.mark.redis
class TestRedisCacheBackendIntegration:
    """Integration tests with real Redis (if available)."""

    @pytest.fixture(scope="class")
    def real_backend(self):
        backend = RedisCacheBackend(TEST_REDIS_URL, socket_timeout=1, connect_timeout=1)
        if not backend.is_available:
            pytest.skip("Redis cache not available")
        backend.delete_by_prefix("test_scores:")
        return backend

    def test_23_real_round_trip(self, real_backend):
        real_backend.set_with_ttl("test_scores:r1:j1", "payload", 60)

        assert real_backend.get("test_scores:r1:j1") == "payload"
        assert real_backend.count_by_prefix("test_scores:r1:") == 1
        assert real_backend.delete_by_prefix("test_scores:r1:") == 1
        assert real_backend.get("test_scores:r1:j1") is None

    def test_24_real_ttl_expiration(self, real_backend):
        real_backend.set_with_ttl("test_scores:ttl", "payload", 1)
        assert real_backend.get("test_scores:ttl") == "payload"

        time.sleep(2)

        assert real_backend.get("test_scores:ttl") is None
