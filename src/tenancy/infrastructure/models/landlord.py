"""SQLAlchemy ORM models for landlords and their domain lookup rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tenancy.infrastructure.database.models import Base, TimestampMixin
from tenancy.infrastructure.models.tenant import DomainList


class LandlordModel(Base, TimestampMixin):
    """ORM model for the landlords table."""

    __tablename__ = "landlords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    domains: Mapped[list[str]] = mapped_column(DomainList, nullable=False, default=list)
    database: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def database_config(self) -> dict[str, Any] | None:
        return self.database if isinstance(self.database, dict) else None

    def context_payload(self) -> dict[str, Any]:
        return {
            **(self.data or {}),
            "name": self.name,
            "domains": [d for d in (self.domains or []) if isinstance(d, str)],
        }

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<LandlordModel(id={self.id}, slug={self.slug})>"


class LandlordDomainModel(Base, TimestampMixin):
    """ORM model for the flat landlord domain lookup table."""

    __tablename__ = "landlord_domains"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    landlord_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("landlords.id", ondelete="CASCADE"), nullable=False, index=True
    )
    domain: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
