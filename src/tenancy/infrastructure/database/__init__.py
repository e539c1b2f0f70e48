"""Database infrastructure: declarative base and connection management."""

from tenancy.infrastructure.database.connections import ConnectionManager
from tenancy.infrastructure.database.models import Base, TimestampMixin

__all__ = [
    "Base",
    "ConnectionManager",
    "TimestampMixin",
]
