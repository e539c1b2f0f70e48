"""SQLAlchemy implementation of ITenantRepository."""

from __future__ import annotations

from sqlalchemy.orm import Session

from tenancy.infrastructure.cache import CacheManager
from tenancy.infrastructure.models import TenantDomainModel, TenantModel
from tenancy.infrastructure.observability import DomainLookupProbe
from tenancy.infrastructure.repositories.base import SqlAlchemyEntityRepository
from tenancy.infrastructure.settings import TenancySettings


class TenantRepository(SqlAlchemyEntityRepository[TenantModel]):
    """Repository managing tenant storage and the tenant domain index."""

    kind = "tenant"

    def __init__(
        self,
        session: Session,
        settings: TenancySettings,
        cache: CacheManager | None = None,
        probe: DomainLookupProbe | None = None,
        model: type[TenantModel] = TenantModel,
        domain_model: type[TenantDomainModel] = TenantDomainModel,
    ) -> None:
        super().__init__(
            session=session,
            model=model,
            lookup_table=domain_model.__tablename__,
            foreign_key="tenant_id",
            settings=settings.domain_lookup,
            cache=cache,
            probe=probe,
        )
