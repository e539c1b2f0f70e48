"""Fan-out over every tenant or landlord.

Typical use is a scheduled maintenance job that must run once per tenant,
each run inside that tenant's context.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tenancy.application.observability import DefaultSchedulerProbe, SchedulerProbe
from tenancy.application.tenancy import Tenancy
from tenancy.infrastructure.settings import SchedulerSettings


class TenancyScheduler:
    """Run a callback once per entity inside that entity's context.

    With ``fail_fast`` the first failure propagates immediately. Otherwise
    every entity is visited and the first captured failure is raised once
    the loop is done.
    """

    def __init__(
        self,
        tenancy: Tenancy,
        settings: SchedulerSettings | None = None,
        probe: SchedulerProbe | None = None,
    ) -> None:
        self._tenancy = tenancy
        self._settings = settings or tenancy.settings.scheduler
        self._probe = probe or DefaultSchedulerProbe()

    @property
    def fail_fast(self) -> bool:
        return self._settings.fail_fast

    def each_tenant(self, callback: Callable[[Any], Any]) -> None:
        """Call ``callback(tenant)`` inside ``run_as_tenant`` for every tenant."""
        self._each(
            "tenant",
            list(self._tenancy.all_tenants()),
            self._tenancy.run_as_tenant,
            callback,
        )

    def each_landlord(self, callback: Callable[[Any], Any]) -> None:
        """Call ``callback(landlord)`` inside ``run_as_landlord`` for every landlord."""
        self._each(
            "landlord",
            list(self._tenancy.all_landlords()),
            self._tenancy.run_as_landlord,
            callback,
        )

    def _each(
        self,
        kind: str,
        entities: list[Any],
        run_as: Callable[[Any, Callable[[], Any]], Any],
        callback: Callable[[Any], Any],
    ) -> None:
        fail_fast = self.fail_fast
        self._probe.iteration_started(kind, fail_fast)

        first_failure: Exception | None = None
        failed = 0
        for entity in entities:
            try:
                run_as(entity, lambda entity=entity: callback(entity))
            except Exception as e:
                failed += 1
                self._probe.entity_failed(kind, entity.id, e)
                if fail_fast:
                    self._probe.iteration_finished(kind, len(entities), failed)
                    raise
                if first_failure is None:
                    first_failure = e

        self._probe.iteration_finished(kind, len(entities), failed)
        if first_failure is not None:
            raise first_failure
