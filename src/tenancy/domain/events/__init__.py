"""Domain events for the tenancy package.

Domain events capture facts about context transitions. They are immutable
value objects carrying everything a listener needs to react.
"""

from tenancy.domain.events.landlord import (
    LandlordEnded,
    LandlordResolved,
    LandlordResolving,
    LandlordSwitched,
)
from tenancy.domain.events.tenant import (
    TenancyEnded,
    TenantResolved,
    TenantResolving,
    TenantSwitched,
)

# Type alias for all domain events in the tenancy package
DomainEvent = (
    TenantResolving
    | TenantResolved
    | TenantSwitched
    | TenancyEnded
    | LandlordResolving
    | LandlordResolved
    | LandlordSwitched
    | LandlordEnded
)

__all__ = [
    "DomainEvent",
    "LandlordEnded",
    "LandlordResolved",
    "LandlordResolving",
    "LandlordSwitched",
    "TenancyEnded",
    "TenantResolved",
    "TenantResolving",
    "TenantSwitched",
]
