"""Ports (interfaces) for the tenancy package.

Ports define the contracts for repositories, resolvers, tasks, caches and
event sinks without specifying implementation details.
"""

from tenancy.ports.cache import CacheBackend
from tenancy.ports.events import EventDispatcher
from tenancy.ports.exceptions import (
    InconsistentTenantLandlordContext,
    InvalidTenancyConfiguration,
    TenancyError,
    UnresolvedLandlordContext,
    UnresolvedTenantContext,
)
from tenancy.ports.repositories import (
    IEntityRepository,
    ILandlordRepository,
    ISynchronizesDomainLookup,
    ITenantRepository,
)
from tenancy.ports.resolvers import EntityResolver, TenancyRequest
from tenancy.ports.tasks import ContextTask

__all__ = [
    "CacheBackend",
    "ContextTask",
    "EntityResolver",
    "EventDispatcher",
    "IEntityRepository",
    "ILandlordRepository",
    "ISynchronizesDomainLookup",
    "ITenantRepository",
    "InconsistentTenantLandlordContext",
    "InvalidTenancyConfiguration",
    "TenancyError",
    "TenancyRequest",
    "UnresolvedLandlordContext",
    "UnresolvedTenantContext",
]
