"""SQLAlchemy implementation of ILandlordRepository."""

from __future__ import annotations

from sqlalchemy.orm import Session

from tenancy.infrastructure.cache import CacheManager
from tenancy.infrastructure.models import LandlordDomainModel, LandlordModel
from tenancy.infrastructure.observability import DomainLookupProbe
from tenancy.infrastructure.repositories.base import SqlAlchemyEntityRepository
from tenancy.infrastructure.settings import TenancySettings


class LandlordRepository(SqlAlchemyEntityRepository[LandlordModel]):
    """Repository managing landlord storage and the landlord domain index."""

    kind = "landlord"

    def __init__(
        self,
        session: Session,
        settings: TenancySettings,
        cache: CacheManager | None = None,
        probe: DomainLookupProbe | None = None,
        model: type[LandlordModel] = LandlordModel,
        domain_model: type[LandlordDomainModel] = LandlordDomainModel,
    ) -> None:
        super().__init__(
            session=session,
            model=model,
            lookup_table=domain_model.__tablename__,
            foreign_key="landlord_id",
            settings=settings.landlord.domain_lookup,
            cache=cache,
            probe=probe,
        )
