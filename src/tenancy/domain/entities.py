"""Entity capabilities consumed by the tenancy core.

Tenants and landlords are owned by the host application's repositories.
The core only relies on the structural protocols below; it never
constructs or persists an entity itself.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

EntityId = int | str


@runtime_checkable
class Entity(Protocol):
    """Identity shared by tenants and landlords.

    Attributes:
        id: Primary key (integer or string).
        slug: Unique, URL-safe identifier.
        name: Human readable name.
        domains: Ordered list of hostnames served by the entity.
    """

    @property
    def id(self) -> EntityId: ...

    @property
    def slug(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def domains(self) -> list[str]: ...

    def context_payload(self) -> dict[str, Any]:
        """Return serializable data carried along with the entity's context."""
        ...


@runtime_checkable
class Tenant(Entity, Protocol):
    """An isolated customer or organization scope."""


@runtime_checkable
class Landlord(Entity, Protocol):
    """A higher-level owner grouping multiple tenants."""


@runtime_checkable
class LandlordAwareTenant(Protocol):
    """A tenant that knows which landlord owns it."""

    @property
    def landlord_id(self) -> EntityId | None: ...


@runtime_checkable
class DatabaseAwareEntity(Protocol):
    """An entity that carries its own database connection settings."""

    def database_config(self) -> dict[str, Any] | None:
        """Return connection settings; the ``"connection"`` key names a connection."""
        ...
