"""Task mapping context payload fields onto runtime configuration keys."""

from __future__ import annotations

from typing import Any

from tenancy.domain.value_objects import EntityContext
from tenancy.infrastructure.runtime_config import RuntimeConfig
from tenancy.infrastructure.tasks.snapshot import SnapshotArena
from tenancy.shared_kernel.dot_path import data_get
from tenancy.shared_kernel.scoped_overrides import check_scope


class MapConfigTask:
    """Copy payload values into ``RuntimeConfig`` for the active context.

    ``mappings`` maps a runtime config key (dot-path) to a payload key
    (dot-path), e.g. ``{"mail.from.name": "name"}``. Values are written as
    ``scope`` overrides. Each activation snapshots that scope's overrides,
    including for keys whose payload value is missing, and
    ``forget_current`` restores exactly that snapshot.
    """

    def __init__(
        self,
        config: RuntimeConfig,
        mappings: dict[str, str] | None = None,
        scope: str = "tenant",
    ):
        self._config = config
        self._mappings = {
            target: source
            for target, source in (mappings or {}).items()
            if isinstance(target, str) and target and isinstance(source, str) and source
        }
        self._scope = check_scope(scope)
        self._snapshots: SnapshotArena[dict[str, Any]] = SnapshotArena()

    def make_current(self, context: EntityContext) -> None:
        if not self._mappings:
            return

        self._snapshots.enter(self._config.overrides(self._scope))
        payload = context.payload()
        for target, source in self._mappings.items():
            value = data_get(payload, source)
            if value is None:
                continue
            self._config.override(self._scope, target, value)

    def forget_current(self, context: EntityContext) -> None:
        if self._snapshots.depth == 0:
            return
        self._config.set_overrides(self._scope, self._snapshots.leave())
