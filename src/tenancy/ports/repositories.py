"""Repository protocols (ports) for the tenancy package.

The engine, resolvers and scheduler depend only on these capabilities.
Storage-backed implementations live in ``tenancy.infrastructure``; hosts may
provide their own.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from tenancy.domain.entities import Entity, EntityId, Landlord, Tenant
from tenancy.domain.value_objects import Identifier


@runtime_checkable
class IEntityRepository(Protocol):
    """Lookup and enumeration capability shared by tenant and landlord stores."""

    def find_by_id(self, entity_id: EntityId) -> Entity | None:
        """Retrieve an entity by primary key.

        Args:
            entity_id: The primary key

        Returns:
            The entity, or None if not found
        """
        ...

    def find_by_slug(self, slug: str) -> Entity | None:
        """Retrieve an entity by its unique slug."""
        ...

    def find_by_domain(self, domain: str) -> Entity | None:
        """Retrieve the entity serving ``domain``.

        Implementations normalize the domain before comparing.
        """
        ...

    def find_by_identifier(self, identifier: EntityId | Identifier) -> Entity | None:
        """Retrieve an entity by an opaque identifier.

        The lookup order is defined by ``identifier_candidates``.
        """
        ...

    def all(self) -> Iterable[Entity]:
        """Enumerate every entity."""
        ...

    def create(self, attributes: dict[str, Any]) -> Entity:
        """Persist a new entity from ``attributes`` and return it."""
        ...


@runtime_checkable
class ITenantRepository(IEntityRepository, Protocol):
    """Repository for tenants."""

    def find_by_id(self, entity_id: EntityId) -> Tenant | None: ...

    def find_by_slug(self, slug: str) -> Tenant | None: ...

    def find_by_domain(self, domain: str) -> Tenant | None: ...

    def find_by_identifier(self, identifier: EntityId | Identifier) -> Tenant | None: ...

    def all(self) -> Iterable[Tenant]: ...

    def create(self, attributes: dict[str, Any]) -> Tenant: ...


@runtime_checkable
class ILandlordRepository(IEntityRepository, Protocol):
    """Repository for landlords."""

    def find_by_id(self, entity_id: EntityId) -> Landlord | None: ...

    def find_by_slug(self, slug: str) -> Landlord | None: ...

    def find_by_domain(self, domain: str) -> Landlord | None: ...

    def find_by_identifier(
        self, identifier: EntityId | Identifier
    ) -> Landlord | None: ...

    def all(self) -> Iterable[Landlord]: ...

    def create(self, attributes: dict[str, Any]) -> Landlord: ...


@runtime_checkable
class ISynchronizesDomainLookup(Protocol):
    """Maintains the flat domain lookup index for an entity kind."""

    def sync_domain_lookup(self, entity: Entity) -> None:
        """Rebuild every lookup row for ``entity`` from its current domains."""
        ...

    def purge_domain_lookup(self, entity_id: EntityId) -> None:
        """Remove every lookup row for ``entity_id``."""
        ...
