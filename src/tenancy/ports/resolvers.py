"""Resolver and request protocols.

The HTTP layer adapts its own request type to ``TenancyRequest``; the core
never constructs requests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from tenancy.domain.entities import Entity


@runtime_checkable
class TenancyRequest(Protocol):
    """The slice of an inbound request that resolvers read."""

    @property
    def host(self) -> str | None:
        """Host name the request was addressed to."""
        ...

    def segment(self, index: int) -> str | None:
        """Return the 1-based path segment, or None when absent."""
        ...

    def header(self, name: str) -> str | None:
        """Return a header value (case-insensitive name), or None."""
        ...

    @property
    def session(self) -> Mapping[str, Any] | None:
        """Session key-value store, or None when the request has no session."""
        ...

    @property
    def user(self) -> Any:
        """The authenticated principal, or None."""
        ...


@runtime_checkable
class EntityResolver(Protocol):
    """Strategy mapping a request to an entity.

    A miss is ``None``; resolvers never raise for absence of a match.
    """

    def resolve(self, request: TenancyRequest) -> Entity | None: ...
