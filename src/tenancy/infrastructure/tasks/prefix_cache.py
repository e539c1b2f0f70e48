"""Task namespacing cache keys by the active entity."""

from __future__ import annotations

from tenancy.domain.value_objects import EntityContext
from tenancy.infrastructure.cache import CacheManager
from tenancy.infrastructure.settings import CachePrefixSettings
from tenancy.infrastructure.tasks.snapshot import SnapshotArena
from tenancy.shared_kernel.scoped_overrides import check_scope


class PrefixCacheTask:
    """Rewrite the cache prefix to ``{prefix}{delimiter}{id}`` while active.

    Only the task's ``scope`` override on the cache manager is written; the
    override in place before each activation is snapshotted and put back by
    the matching ``forget_current``. Resolved store handles are dropped on
    both sides so the next ``store()`` picks up the new prefix.
    """

    def __init__(
        self,
        cache: CacheManager,
        settings: CachePrefixSettings | None = None,
        scope: str = "tenant",
    ) -> None:
        self._cache = cache
        self._settings = settings or CachePrefixSettings()
        self._scope = check_scope(scope)
        self._snapshots: SnapshotArena[str | None] = SnapshotArena()

    def make_current(self, context: EntityContext) -> None:
        self._snapshots.enter(self._cache.prefix_override(self._scope))
        self._cache.set_prefix_override(
            self._scope,
            f"{self._settings.prefix}{self._settings.delimiter}{context.id}",
        )
        self._cache.forget_driver()

    def forget_current(self, context: EntityContext) -> None:
        if self._snapshots.depth == 0:
            return
        self._cache.set_prefix_override(self._scope, self._snapshots.leave())
        self._cache.forget_driver()
