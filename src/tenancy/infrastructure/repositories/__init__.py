"""SQLAlchemy-backed entity repositories with domain lookup indexes."""

from tenancy.infrastructure.repositories.base import SqlAlchemyEntityRepository
from tenancy.infrastructure.repositories.landlord_repository import LandlordRepository
from tenancy.infrastructure.repositories.tenant_repository import TenantRepository

__all__ = [
    "LandlordRepository",
    "SqlAlchemyEntityRepository",
    "TenantRepository",
]
