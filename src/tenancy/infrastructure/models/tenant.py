"""SQLAlchemy ORM models for tenants and their domain lookup rows.

These reference models satisfy the ``Tenant``, ``LandlordAwareTenant`` and
``DatabaseAwareEntity`` protocols, so the repository can hand ORM
instances straight to the tenancy engine.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from tenancy.infrastructure.database.models import Base, TimestampMixin

# JSONB on PostgreSQL enables the containment operator used for domain scans
DomainList = JSON().with_variant(JSONB(), "postgresql")


class TenantModel(Base, TimestampMixin):
    """ORM model for the tenants table."""

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    domains: Mapped[list[str]] = mapped_column(DomainList, nullable=False, default=list)
    landlord_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("landlords.id", ondelete="SET NULL"), nullable=True
    )
    database: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def database_config(self) -> dict[str, Any] | None:
        return self.database if isinstance(self.database, dict) else None

    def context_payload(self) -> dict[str, Any]:
        return {
            **(self.data or {}),
            "name": self.name,
            "domains": [d for d in (self.domains or []) if isinstance(d, str)],
            "landlord_id": self.landlord_id,
        }

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, slug={self.slug})>"


class TenantDomainModel(Base, TimestampMixin):
    """ORM model for the flat tenant domain lookup table.

    One row per normalized domain. Rows are rebuilt wholesale whenever a
    tenant's domain set changes.
    """

    __tablename__ = "tenant_domains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    domain: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
