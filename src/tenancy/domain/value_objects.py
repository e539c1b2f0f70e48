"""Value objects for the tenancy domain.

Contexts are immutable activation records wrapping one resolved entity.
Identifiers are an explicit tagged union so the "is this a slug or a
primary key?" question is answered in exactly one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from tenancy.domain.entities import Entity, EntityId, Landlord, Tenant


class IsolationMode(StrEnum):
    """How tenant data is separated at the storage layer."""

    SHARED_DATABASE = "shared-database"
    SEPARATE_SCHEMA = "separate-schema"
    SEPARATE_DATABASE = "separate-database"


@dataclass(frozen=True)
class EntityContext:
    """Immutable wrapper around one entity reference."""

    entity: Entity

    @property
    def id(self) -> EntityId:
        """Identifier of the wrapped entity."""
        return self.entity.id

    @property
    def slug(self) -> str:
        """Slug of the wrapped entity."""
        return self.entity.slug

    def payload(self) -> dict[str, Any]:
        """Serializable snapshot of the context.

        ``id`` and ``slug`` always win over same-named keys from the
        entity's own context payload.
        """
        return {**self.entity.context_payload(), "id": self.id, "slug": self.slug}

    def same_entity(self, other: EntityContext | None) -> bool:
        """Return True when ``other`` wraps the entity with the same id."""
        return other is not None and other.id == self.id


@dataclass(frozen=True)
class TenantContext(EntityContext):
    """Activation record for a tenant."""

    entity: Tenant

    @property
    def tenant(self) -> Tenant:
        """The wrapped tenant."""
        return self.entity


@dataclass(frozen=True)
class LandlordContext(EntityContext):
    """Activation record for a landlord."""

    entity: Landlord

    @property
    def landlord(self) -> Landlord:
        """The wrapped landlord."""
        return self.entity


@dataclass(frozen=True)
class ById:
    """Look an entity up by primary key."""

    value: EntityId


@dataclass(frozen=True)
class BySlug:
    """Look an entity up by slug."""

    value: str


Identifier = ById | BySlug


def identifier_candidates(raw: EntityId | Identifier) -> list[Identifier]:
    """Expand a raw identifier into the lookups to try, in order.

    This is the single place the ambiguity policy lives:

    * an explicit ``ById``/``BySlug`` is used as-is;
    * an ``int`` can only be a primary key;
    * a ``str`` is tried as a slug first, then as a primary key, so a slug
      wins when a string matches both (``"42"`` as a slug beats id 42).

    Args:
        raw: Opaque identifier coming from a request, payload or caller.

    Returns:
        Ordered list of lookups; empty for values that cannot identify anything.
    """
    if isinstance(raw, (ById, BySlug)):
        return [raw]
    if isinstance(raw, bool):
        return []
    if isinstance(raw, int):
        return [ById(raw)]
    if isinstance(raw, str) and raw != "":
        return [BySlug(raw), ById(raw)]
    return []
