"""Per-scope overrides of a process-wide value.

Tenant and landlord tasks rewrite the same shared values (the default
connection, the cache prefix). Each side writes only its own slot and the
effective value is read through ``OVERRIDE_SCOPES`` in order, so the
tenant slot wins over the landlord slot, which wins over the base value.
Tenant and landlord pops may then happen in any order.
"""

from __future__ import annotations

from typing import Generic, TypeVar

OVERRIDE_SCOPES = ("tenant", "landlord")

T = TypeVar("T")


def check_scope(scope: str) -> str:
    """Return ``scope`` unchanged, or raise ValueError for an unknown scope."""
    if scope not in OVERRIDE_SCOPES:
        raise ValueError(
            f"Unknown override scope [{scope}]. Expected one of: {', '.join(OVERRIDE_SCOPES)}."
        )
    return scope


class ScopedOverrides(Generic[T]):
    """One optional override per scope on top of a base value."""

    def __init__(self) -> None:
        self._slots: dict[str, T] = {}

    def get(self, scope: str) -> T | None:
        return self._slots.get(check_scope(scope))

    def set(self, scope: str, value: T | None) -> None:
        """Set the override for ``scope``; None clears it."""
        check_scope(scope)
        if value is None:
            self._slots.pop(scope, None)
            return
        self._slots[scope] = value

    def resolve(self, base: T) -> T:
        """Return the highest-precedence override, or ``base`` when none is set."""
        for scope in OVERRIDE_SCOPES:
            if scope in self._slots:
                return self._slots[scope]
        return base
