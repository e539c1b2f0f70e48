"""Reference ORM models for tenants, landlords and domain lookup rows."""

from tenancy.infrastructure.models.landlord import LandlordDomainModel, LandlordModel
from tenancy.infrastructure.models.tenant import TenantDomainModel, TenantModel

__all__ = [
    "LandlordDomainModel",
    "LandlordModel",
    "TenantDomainModel",
    "TenantModel",
]
