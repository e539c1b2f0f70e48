"""Protocol for fan-out scheduler observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from tenancy.shared_kernel.observability_context import ObservationContext


class SchedulerProbe(Protocol):
    """Domain probe for per-entity fan-out runs."""

    def iteration_started(self, kind: str, fail_fast: bool) -> None:
        """Record the start of a fan-out over every entity of a kind."""
        ...

    def entity_failed(self, kind: str, entity_id: Any, error: Exception) -> None:
        """Record that the callback raised for one entity."""
        ...

    def iteration_finished(self, kind: str, processed: int, failed: int) -> None:
        """Record the end of a fan-out."""
        ...

    def with_context(self, context: ObservationContext) -> SchedulerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSchedulerProbe:
    """Default implementation of SchedulerProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSchedulerProbe:
        """Create a new probe with observation context bound."""
        return DefaultSchedulerProbe(logger=self._logger, context=context)

    def iteration_started(self, kind: str, fail_fast: bool) -> None:
        self._logger.info(
            "scheduler_iteration_started",
            kind=kind,
            fail_fast=fail_fast,
            **self._get_context_kwargs(),
        )

    def entity_failed(self, kind: str, entity_id: Any, error: Exception) -> None:
        self._logger.error(
            "scheduler_entity_failed",
            kind=kind,
            entity_id=entity_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def iteration_finished(self, kind: str, processed: int, failed: int) -> None:
        self._logger.info(
            "scheduler_iteration_finished",
            kind=kind,
            processed=processed,
            failed=failed,
            **self._get_context_kwargs(),
        )
