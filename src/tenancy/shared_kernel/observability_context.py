"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for
instrumentation, following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures unit-of-work metadata that should be included with all
    instrumentation events, so a request, queue job or command can be
    followed through every context switch it performs.

    Attributes:
        request_id: Identifier of the current request/job/command.
        tenant_id: Active tenant identifier (if applicable).
        landlord_id: Active landlord identifier (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123")
        probe = DefaultTenancyProbe().with_context(context)
    """

    request_id: str | None = None
    tenant_id: str | None = None
    landlord_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        if self.landlord_id is not None:
            result["landlord_id"] = self.landlord_id
        result.update(self.extra)
        return result

    def with_tenant(self, tenant_id: str | None) -> ObservationContext:
        """Create a new context with the tenant identifier set."""
        return replace(self, tenant_id=tenant_id)

    def with_landlord(self, landlord_id: str | None) -> ObservationContext:
        """Create a new context with the landlord identifier set."""
        return replace(self, landlord_id=landlord_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
