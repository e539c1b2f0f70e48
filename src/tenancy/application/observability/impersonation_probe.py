"""Protocol for impersonation token observability.

Tokens themselves are secrets and are never logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from tenancy.shared_kernel.observability_context import ObservationContext


class ImpersonationProbe(Protocol):
    """Domain probe for impersonation token operations."""

    def token_issued(
        self, tenant_id: Any, actor_id: Any, actor_kind: str | None, ttl_seconds: int
    ) -> None:
        """Record that an impersonation token was issued."""
        ...

    def token_target_not_found(self, actor_id: Any) -> None:
        """Record that a token was requested for an unknown tenant."""
        ...

    def token_consumed(self, tenant_id: Any, actor_id: Any) -> None:
        """Record that a token was redeemed."""
        ...

    def token_rejected(self) -> None:
        """Record that a token was unknown, expired or already used."""
        ...

    def with_context(self, context: ObservationContext) -> ImpersonationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultImpersonationProbe:
    """Default implementation of ImpersonationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultImpersonationProbe:
        """Create a new probe with observation context bound."""
        return DefaultImpersonationProbe(logger=self._logger, context=context)

    def token_issued(
        self, tenant_id: Any, actor_id: Any, actor_kind: str | None, ttl_seconds: int
    ) -> None:
        """Record that an impersonation token was issued."""
        self._logger.info(
            "impersonation_token_issued",
            tenant_id=tenant_id,
            actor_id=actor_id,
            actor_kind=actor_kind,
            ttl_seconds=ttl_seconds,
            **self._get_context_kwargs(),
        )

    def token_target_not_found(self, actor_id: Any) -> None:
        """Record that a token was requested for an unknown tenant."""
        self._logger.warning(
            "impersonation_target_not_found",
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def token_consumed(self, tenant_id: Any, actor_id: Any) -> None:
        """Record that a token was redeemed."""
        self._logger.info(
            "impersonation_token_consumed",
            tenant_id=tenant_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def token_rejected(self) -> None:
        """Record that a token was unknown, expired or already used."""
        self._logger.warning(
            "impersonation_token_rejected",
            **self._get_context_kwargs(),
        )
