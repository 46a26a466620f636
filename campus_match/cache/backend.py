"""Cache Backends - Key/value stores with write-time TTL."""
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from campus_match.utils import sanitize_url

logger = logging.getLogger(__name__)

SCAN_BATCH_SIZE = 100
GLOB_METACHARACTERS = "*?[]\\"


class CacheBackend(ABC):
    """
    Minimal store used by the caches.

    Methods raise on backend failure; callers decide how to degrade.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or expired."""

    @abstractmethod
    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value, replacing any existing entry, expiring ttl_seconds from now."""

    @abstractmethod
    def delete(self, key: str) -> int:
        """Delete one key. Returns number of keys removed."""

    @abstractmethod
    def delete_by_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix. Returns number of keys removed."""

    @abstractmethod
    def count_by_prefix(self, prefix: str) -> int:
        """Count live keys starting with prefix."""

    @abstractmethod
    def ping(self) -> bool:
        """Raise if the backend is unreachable."""

    @property
    def is_available(self) -> bool:
        """Check if backend is reachable."""
        try:
            return bool(self.ping())
        except Exception:
            return False


def escape_glob(text: str) -> str:
    """Backslash-escape Redis MATCH glob metacharacters so text matches literally."""
    return "".join(f"\\{c}" if c in GLOB_METACHARACTERS else c for c in text)


class RedisCacheBackend(CacheBackend):
    """
    Redis-backed store.

    Socket timeouts bound every round trip. A connection error or timeout
    marks the backend unavailable: reads then miss without touching Redis,
    and other operations raise, until a ping succeeds again. Pings are
    retried at most once per recheck interval.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        socket_timeout: float = 2.0,
        connect_timeout: float = 2.0,
        recheck_interval: float = 30.0,
        client: Optional[Redis] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        self.redis_url = redis_url
        self.recheck_interval = recheck_interval
        self._clock = clock or time.monotonic
        self._available = True
        self._next_check_at = 0.0
        self._redis = client or Redis.from_url(
            redis_url,
            password=password,
            decode_responses=True,
            socket_connect_timeout=connect_timeout,
            socket_timeout=socket_timeout
        )
        logger.info(f"Cache backend configured for Redis at {sanitize_url(redis_url)}")

    def mark_unavailable(self) -> None:
        """Stop sending commands to Redis until the next successful recheck."""
        if self._available:
            logger.warning(
                f"Redis at {sanitize_url(self.redis_url)} marked unavailable, "
                f"rechecking every {self.recheck_interval:.0f}s"
            )
        self._available = False
        self._next_check_at = self._clock() + self.recheck_interval

    def _usable(self) -> bool:
        if self._available:
            return True
        if self._clock() < self._next_check_at:
            return False
        try:
            self._redis.ping()
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.debug(f"Redis still unavailable: {e}")
            self.mark_unavailable()
            return False
        self._available = True
        logger.info(f"Redis at {sanitize_url(self.redis_url)} available again")
        return True

    def _call(self, command: str, *args, **kwargs):
        if not self._usable():
            raise RedisConnectionError("Redis marked unavailable")
        try:
            return getattr(self._redis, command)(*args, **kwargs)
        except (RedisConnectionError, RedisTimeoutError):
            self.mark_unavailable()
            raise

    def get(self, key: str) -> Optional[str]:
        if not self._usable():
            return None
        return self._call("get", key)

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        self._call("setex", key, ttl_seconds, value)

    def delete(self, key: str) -> int:
        return int(self._call("delete", key))

    def _scan(self, prefix: str):
        pattern = f"{escape_glob(prefix)}*"
        cursor = 0
        while True:
            cursor, keys = self._call("scan", cursor=cursor, match=pattern, count=SCAN_BATCH_SIZE)
            yield keys
            if cursor == 0:
                break

    def delete_by_prefix(self, prefix: str) -> int:
        deleted = 0
        for keys in self._scan(prefix):
            if keys:
                deleted += int(self._call("delete", *keys))
        return deleted

    def count_by_prefix(self, prefix: str) -> int:
        return sum(len(keys) for keys in self._scan(prefix))

    def ping(self) -> bool:
        return bool(self._redis.ping())

    @property
    def is_available(self) -> bool:
        """Reachable and not marked unavailable."""
        return self._usable() and super().is_available


class InMemoryCacheBackend(CacheBackend):
    """
    Process-local store with the same TTL semantics as Redis.

    Expired entries are dropped lazily on access.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def _live(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live(key)

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key: str) -> int:
        with self._lock:
            return 1 if self._entries.pop(key, None) is not None else 0

    def delete_by_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
            return len(keys)

    def count_by_prefix(self, prefix: str) -> int:
        with self._lock:
            return sum(1 for k in list(self._entries) if k.startswith(prefix) and self._live(k) is not None)

    def ping(self) -> bool:
        return True
