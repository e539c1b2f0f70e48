"""Mutable runtime configuration addressed by dot-paths.

Settings objects are immutable once loaded; values that must change while
a context is active (mail sender, storage bucket, feature flags) live
here instead. Tasks write per-scope overrides on top of the base values;
reads see tenant overrides first, then landlord overrides, then the base.
"""

from __future__ import annotations

import copy
from typing import Any

from tenancy.shared_kernel.dot_path import data_get, data_set
from tenancy.shared_kernel.scoped_overrides import OVERRIDE_SCOPES, check_scope


class RuntimeConfig:
    """Nested dict with ``get``/``set`` by dot-path plus scoped overrides.

    Example:
        config = RuntimeConfig({"mail": {"from": "noreply@example.test"}})
        config.override("tenant", "mail.from", "billing@acme.test")
        config.get("mail.from")
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(values) if values else {}
        self._overrides: dict[str, dict[str, Any]] = {
            scope: {} for scope in OVERRIDE_SCOPES
        }

    def get(self, key: str, default: Any = None) -> Any:
        if not any(self._overrides.values()):
            return data_get(self._values, key, default)
        return data_get(self.all(), key, default)

    def set(self, key: str, value: Any) -> None:
        """Write a base value."""
        data_set(self._values, key, value)

    def all(self) -> dict[str, Any]:
        """Return a copy of the effective values."""
        values = copy.deepcopy(self._values)
        # Lowest precedence first so the tenant scope is applied last
        for scope in reversed(OVERRIDE_SCOPES):
            for key, value in self._overrides[scope].items():
                data_set(values, key, copy.deepcopy(value))
        return values

    def override(self, scope: str, key: str, value: Any) -> None:
        self._overrides[check_scope(scope)][key] = value

    def overrides(self, scope: str) -> dict[str, Any]:
        return dict(self._overrides[check_scope(scope)])

    def set_overrides(self, scope: str, overrides: dict[str, Any]) -> None:
        """Replace every override of ``scope``."""
        self._overrides[check_scope(scope)] = dict(overrides)
