"""Key-value cache protocol used by domain lookups and impersonation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """String-level key-value store with optional per-key TTL."""

    @property
    def backend_name(self) -> str: ...

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int | None = None) -> None: ...

    def delete(self, key: str) -> None: ...

    def pop(self, key: str) -> str | None:
        """Read and delete ``key`` in one step where the store allows it."""
        ...

    def delete_prefix(self, prefix: str) -> int: ...

    def clear(self) -> None: ...
