"""Cache stores for domain lookups and impersonation tokens.

Backends speak strings; ``CacheService`` layers JSON serialization and the
``remember``/``pull`` helpers on top. ``CacheManager`` maps store names to
services and owns the key prefix rewritten by ``PrefixCacheTask``.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import redis
import structlog

from tenancy.ports.cache import CacheBackend
from tenancy.shared_kernel.scoped_overrides import ScopedOverrides

logger = structlog.get_logger()


@dataclass
class _CacheEntry:
    expires_at: float | None
    value: str


class InMemoryCache:
    """Process-local cache with TTL expiry.

    Expired entries are dropped when read, and every ``sweep_interval``
    seconds a write also sweeps all expired entries, so keys that are never
    read again (unused impersonation tokens) do not accumulate.
    """

    def __init__(self, sweep_interval: float = 60.0) -> None:
        self._store: dict[str, _CacheEntry] = {}
        self._sweep_interval = sweep_interval
        self._next_sweep = time.monotonic() + sweep_interval

    @property
    def backend_name(self) -> str:
        return "memory"

    def get(self, key: str) -> str | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and time.monotonic() > entry.expires_at:
            self._store.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        now = time.monotonic()
        if now >= self._next_sweep:
            self._sweep(now)
        expires_at = now + ttl if ttl and ttl > 0 else None
        self._store[key] = _CacheEntry(expires_at=expires_at, value=value)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def pop(self, key: str) -> str | None:
        value = self.get(key)
        self._store.pop(key, None)
        return value

    def delete_prefix(self, prefix: str) -> int:
        keys = [key for key in self._store if key.startswith(prefix)]
        for key in keys:
            self._store.pop(key, None)
        return len(keys)

    def clear(self) -> None:
        self._store.clear()

    def _sweep(self, now: float) -> None:
        expired = [
            key
            for key, entry in self._store.items()
            if entry.expires_at is not None and now > entry.expires_at
        ]
        for key in expired:
            del self._store[key]
        self._next_sweep = now + self._sweep_interval


class NullCache:
    """Cache that stores nothing; every read is a miss."""

    @property
    def backend_name(self) -> str:
        return "none"

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def pop(self, key: str) -> str | None:
        return None

    def delete_prefix(self, prefix: str) -> int:
        return 0

    def clear(self) -> None:
        return None


class RedisCache:
    """Redis-backed cache using redis-py.

    ``pop`` uses ``GETDEL`` so two consumers can never both read the same
    single-use value.
    """

    def __init__(self, url: str | None = None, client: Any = None) -> None:
        if client is None:
            client = redis.Redis.from_url(url, decode_responses=True)
        self._client = client

    @property
    def backend_name(self) -> str:
        return "redis"

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if ttl and ttl > 0:
            self._client.setex(key, ttl, value)
            return None
        self._client.set(key, value)
        return None

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def pop(self, key: str) -> str | None:
        return self._client.getdel(key)

    def delete_prefix(self, prefix: str) -> int:
        deleted = 0
        for key in self._client.scan_iter(f"{prefix}*"):
            self._client.delete(key)
            deleted += 1
        return deleted

    def clear(self) -> None:
        self._client.flushdb()


def _serialize(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def _deserialize(payload: str | None) -> Any | None:
    if payload is None:
        return None
    try:
        return json.loads(payload)
    except ValueError:
        logger.warning("cache_payload_undecodable", payload_length=len(payload))
        return None


class CacheService:
    """JSON-serializing wrapper around a ``CacheBackend``."""

    def __init__(self, backend: CacheBackend | None = None) -> None:
        self._backend = backend or InMemoryCache()

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def get(self, key: str) -> Any | None:
        return _deserialize(self._backend.get(key))

    def put(self, key: str, value: Any, ttl: int | None = None) -> None:
        self._backend.set(key, _serialize(value), ttl)

    def forget(self, key: str) -> None:
        self._backend.delete(key)

    def pull(self, key: str) -> Any | None:
        """Read a value and remove it from the store."""
        return _deserialize(self._backend.pop(key))

    def remember(self, key: str, ttl: int | None, factory: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, computing and storing it on a miss.

        ``None`` results are not cached, so a later write to the index is
        picked up on the next lookup.
        """
        raw = self._backend.get(key)
        if raw is not None:
            return _deserialize(raw)
        value = factory()
        if value is not None:
            self.put(key, value, ttl)
        return value


class CacheManager:
    """Named cache stores plus the active key prefix.

    ``store(None)`` returns the default store. ``prefix`` is the tenant
    override if set, else the landlord override, else the base prefix;
    ``PrefixCacheTask`` writes the overrides per context. ``forget_driver``
    drops the resolved store handles so the next ``store()`` call sees the
    new prefix.
    """

    def __init__(
        self,
        backends: dict[str, CacheBackend] | None = None,
        default: str = "memory",
        prefix: str = "",
    ) -> None:
        self._backends = dict(backends or {"memory": InMemoryCache()})
        self._default = default
        self._base_prefix = prefix
        self._prefix_overrides: ScopedOverrides[str] = ScopedOverrides()
        self._resolved: dict[str, PrefixedCacheService] = {}

    @property
    def prefix(self) -> str:
        return self._prefix_overrides.resolve(self._base_prefix)

    @prefix.setter
    def prefix(self, value: str) -> None:
        self._base_prefix = value

    def prefix_override(self, scope: str) -> str | None:
        return self._prefix_overrides.get(scope)

    def set_prefix_override(self, scope: str, prefix: str | None) -> None:
        """Set the key prefix used while ``scope`` is active; None removes it."""
        self._prefix_overrides.set(scope, prefix)

    def store(self, name: str | None = None) -> PrefixedCacheService:
        """Return the service for ``name`` (or the default store)."""
        store_name = name or self._default
        resolved = self._resolved.get(store_name)
        if resolved is None:
            backend = self._backends.get(store_name)
            if backend is None:
                raise KeyError(f"Cache store [{store_name}] is not configured")
            resolved = PrefixedCacheService(backend, self.prefix)
            self._resolved[store_name] = resolved
        return resolved

    def global_store(self, name: str | None = None) -> CacheService:
        """Return an unprefixed service for ``name`` (or the default store).

        Used for package-owned keys (domain lookups, impersonation tokens)
        that must be readable regardless of which context is active.
        """
        store_name = name or self._default
        backend = self._backends.get(store_name)
        if backend is None:
            raise KeyError(f"Cache store [{store_name}] is not configured")
        return CacheService(backend)

    def forget_driver(self, name: str | None = None) -> None:
        """Drop resolved store handles (all of them when ``name`` is None)."""
        if name is None:
            self._resolved.clear()
            return
        self._resolved.pop(name, None)


class PrefixedCacheService(CacheService):
    """``CacheService`` whose keys are namespaced by a fixed prefix."""

    def __init__(self, backend: CacheBackend, prefix: str = "") -> None:
        super().__init__(backend)
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    def get(self, key: str) -> Any | None:
        return super().get(self._key(key))

    def put(self, key: str, value: Any, ttl: int | None = None) -> None:
        super().put(self._key(key), value, ttl)

    def forget(self, key: str) -> None:
        super().forget(self._key(key))

    def pull(self, key: str) -> Any | None:
        return super().pull(self._key(key))

    def remember(self, key: str, ttl: int | None, factory: Callable[[], Any]) -> Any:
        return super().remember(self._key(key), ttl, factory)
