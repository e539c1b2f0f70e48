"""Resolve an entity from a URL path segment."""

from __future__ import annotations

from tenancy.domain.entities import Entity
from tenancy.ports.repositories import IEntityRepository
from tenancy.ports.resolvers import TenancyRequest


class PathResolver:
    """Look up the identifier found at a 1-based path segment.

    ``/acme/dashboard`` resolves ``acme`` with the default segment of 1.
    """

    def __init__(self, repository: IEntityRepository, segment: int = 1) -> None:
        self._repository = repository
        self._segment = segment if segment >= 1 else 1

    def resolve(self, request: TenancyRequest) -> Entity | None:
        value = request.segment(self._segment)
        if not value:
            return None
        return self._repository.find_by_identifier(value)
