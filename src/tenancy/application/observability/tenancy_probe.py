"""Protocol for tenancy engine observability.

Defines the interface for domain probes that capture context switches,
request resolution and coherence violations in the tenancy engine.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from tenancy.shared_kernel.observability_context import ObservationContext


class TenancyProbe(Protocol):
    """Domain probe for context stack operations."""

    def context_switched(self, kind: str, previous_id: Any, current_id: Any) -> None:
        """Record an effective transition after its tasks ran."""
        ...

    def context_resolved(self, kind: str, entity_id: Any) -> None:
        """Record that a request resolved to an entity."""
        ...

    def context_not_resolved(self, kind: str) -> None:
        """Record that no resolver matched a request."""
        ...

    def context_forgotten(self, kind: str, previous_id: Any) -> None:
        """Record that a whole context stack was collapsed."""
        ...

    def context_unresolved(self, kind: str, identifier: Any) -> None:
        """Record that a value passed to run_as_* named no entity."""
        ...

    def coherence_violated(
        self, tenant_id: Any, expected_landlord_id: Any, actual_landlord_id: Any
    ) -> None:
        """Record that a foreign landlord was activated inside a tenant."""
        ...

    def with_context(self, context: ObservationContext) -> TenancyProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenancyProbe:
    """Default implementation of TenancyProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenancyProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenancyProbe(logger=self._logger, context=context)

    def context_switched(self, kind: str, previous_id: Any, current_id: Any) -> None:
        """Record an effective transition after its tasks ran."""
        self._logger.debug(
            "context_switched",
            kind=kind,
            previous_id=previous_id,
            current_id=current_id,
            **self._get_context_kwargs(),
        )

    def context_resolved(self, kind: str, entity_id: Any) -> None:
        """Record that a request resolved to an entity."""
        self._logger.info(
            "context_resolved",
            kind=kind,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def context_not_resolved(self, kind: str) -> None:
        """Record that no resolver matched a request."""
        self._logger.debug(
            "context_not_resolved",
            kind=kind,
            **self._get_context_kwargs(),
        )

    def context_forgotten(self, kind: str, previous_id: Any) -> None:
        """Record that a whole context stack was collapsed."""
        self._logger.info(
            "context_forgotten",
            kind=kind,
            previous_id=previous_id,
            **self._get_context_kwargs(),
        )

    def context_unresolved(self, kind: str, identifier: Any) -> None:
        """Record that a value passed to run_as_* named no entity."""
        self._logger.warning(
            "context_unresolved",
            kind=kind,
            identifier=identifier if isinstance(identifier, (int, str)) else None,
            **self._get_context_kwargs(),
        )

    def coherence_violated(
        self, tenant_id: Any, expected_landlord_id: Any, actual_landlord_id: Any
    ) -> None:
        """Record that a foreign landlord was activated inside a tenant."""
        self._logger.error(
            "coherence_violated",
            tenant_id=tenant_id,
            expected_landlord_id=expected_landlord_id,
            actual_landlord_id=actual_landlord_id,
            **self._get_context_kwargs(),
        )
