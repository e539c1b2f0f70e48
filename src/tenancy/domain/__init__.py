"""Domain layer for the tenancy package.

Holds the entity capabilities, immutable context value objects, identifier
lookups and domain events. Nothing here touches storage or frameworks.
"""

from tenancy.domain.entities import (
    DatabaseAwareEntity,
    Entity,
    EntityId,
    Landlord,
    LandlordAwareTenant,
    Tenant,
)
from tenancy.domain.value_objects import (
    ById,
    BySlug,
    EntityContext,
    Identifier,
    IsolationMode,
    LandlordContext,
    TenantContext,
    identifier_candidates,
)

__all__ = [
    "ById",
    "BySlug",
    "DatabaseAwareEntity",
    "Entity",
    "EntityContext",
    "EntityId",
    "Identifier",
    "IsolationMode",
    "Landlord",
    "LandlordAwareTenant",
    "LandlordContext",
    "Tenant",
    "TenantContext",
    "identifier_candidates",
]
