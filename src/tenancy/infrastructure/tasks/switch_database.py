"""Task switching the default database connection to the active entity's."""

from __future__ import annotations

from dataclasses import dataclass

from tenancy.domain.entities import DatabaseAwareEntity
from tenancy.domain.value_objects import EntityContext, IsolationMode
from tenancy.infrastructure.database.connections import ConnectionManager
from tenancy.infrastructure.tasks.snapshot import SnapshotArena
from tenancy.shared_kernel.scoped_overrides import check_scope


@dataclass(frozen=True)
class _ConnectionSnapshot:
    previous_override: str | None
    switched_to: str | None


class SwitchDatabaseTask:
    """Point ``ConnectionManager.default`` at the entity's connection.

    The task writes only its own ``scope`` override on the connection
    manager, so a tenant task and a landlord task can share one manager.
    In ``shared-database`` mode nothing is switched, but a snapshot is still
    taken so the matching ``forget_current`` stays balanced. The connection
    name comes from the entity's ``database_config()["connection"]`` or the
    configured fallback; the pooled engine is purged on both sides of the
    swap so connections never carry over between entities.
    """

    def __init__(
        self,
        connections: ConnectionManager,
        isolation: IsolationMode = IsolationMode.SHARED_DATABASE,
        fallback_connection: str | None = None,
        scope: str = "tenant",
    ) -> None:
        self._connections = connections
        self._isolation = isolation
        self._fallback_connection = fallback_connection or None
        self._scope = check_scope(scope)
        self._snapshots: SnapshotArena[_ConnectionSnapshot] = SnapshotArena()

    def make_current(self, context: EntityContext) -> None:
        previous = self._connections.override(self._scope)
        connection = None
        if self._isolation is not IsolationMode.SHARED_DATABASE:
            connection = self._resolve_connection_name(context)

        if connection is None:
            self._snapshots.enter(_ConnectionSnapshot(previous, None))
            return

        if connection != self._connections.default:
            self._connections.purge(connection)
        self._connections.set_override(self._scope, connection)
        self._snapshots.enter(_ConnectionSnapshot(previous, connection))

    def forget_current(self, context: EntityContext) -> None:
        snapshot = self._snapshots.leave()
        if snapshot is None or snapshot.switched_to is None:
            return

        self._connections.set_override(self._scope, snapshot.previous_override)
        if snapshot.switched_to != self._connections.default:
            self._connections.purge(snapshot.switched_to)

    def _resolve_connection_name(self, context: EntityContext) -> str | None:
        entity = context.entity
        if not isinstance(entity, DatabaseAwareEntity):
            return self._fallback_connection
        database = entity.database_config()
        if not isinstance(database, dict):
            return self._fallback_connection
        connection = database.get("connection")
        if isinstance(connection, str) and connection:
            return connection
        return self._fallback_connection
