"""Domain probe for domain lookup repository operations.

Following Domain-Oriented Observability patterns, this probe captures
which lookup tier answered a domain query and when the flat lookup index
degraded, without exposing logging details to the repository.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from tenancy.shared_kernel.observability_context import ObservationContext


class DomainLookupProbe(Protocol):
    """Domain probe for domain lookup repository operations."""

    def domain_resolved(self, kind: str, domain: str, entity_id: Any, tier: str) -> None:
        """Record that a domain was resolved to an entity by a lookup tier."""
        ...

    def domain_not_found(self, kind: str, domain: str) -> None:
        """Record that no tier resolved a domain."""
        ...

    def lookup_table_failed(self, kind: str, table: str, error: Exception) -> None:
        """Record that the flat lookup table errored and was skipped."""
        ...

    def domain_lookup_synced(self, kind: str, entity_id: Any, count: int) -> None:
        """Record that an entity's lookup rows were rebuilt."""
        ...

    def domain_lookup_purged(self, kind: str, entity_id: Any) -> None:
        """Record that an entity's lookup rows were removed."""
        ...

    def domain_lookup_write_failed(
        self, kind: str, entity_id: Any, error: Exception
    ) -> None:
        """Record that rebuilding or purging lookup rows failed."""
        ...

    def with_context(self, context: ObservationContext) -> DomainLookupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDomainLookupProbe:
    """Default implementation of DomainLookupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultDomainLookupProbe:
        """Create a new probe with observation context bound."""
        return DefaultDomainLookupProbe(logger=self._logger, context=context)

    def domain_resolved(self, kind: str, domain: str, entity_id: Any, tier: str) -> None:
        """Record that a domain was resolved to an entity by a lookup tier."""
        self._logger.debug(
            "domain_resolved",
            kind=kind,
            domain=domain,
            entity_id=entity_id,
            tier=tier,
            **self._get_context_kwargs(),
        )

    def domain_not_found(self, kind: str, domain: str) -> None:
        """Record that no tier resolved a domain."""
        self._logger.debug(
            "domain_not_found",
            kind=kind,
            domain=domain,
            **self._get_context_kwargs(),
        )

    def lookup_table_failed(self, kind: str, table: str, error: Exception) -> None:
        """Record that the flat lookup table errored and was skipped."""
        self._logger.warning(
            "domain_lookup_table_failed",
            kind=kind,
            table=table,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def domain_lookup_synced(self, kind: str, entity_id: Any, count: int) -> None:
        """Record that an entity's lookup rows were rebuilt."""
        self._logger.info(
            "domain_lookup_synced",
            kind=kind,
            entity_id=entity_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def domain_lookup_purged(self, kind: str, entity_id: Any) -> None:
        """Record that an entity's lookup rows were removed."""
        self._logger.info(
            "domain_lookup_purged",
            kind=kind,
            entity_id=entity_id,
            **self._get_context_kwargs(),
        )

    def domain_lookup_write_failed(
        self, kind: str, entity_id: Any, error: Exception
    ) -> None:
        """Record that rebuilding or purging lookup rows failed."""
        self._logger.warning(
            "domain_lookup_write_failed",
            kind=kind,
            entity_id=entity_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
