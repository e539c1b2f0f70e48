"""Resolve an entity from a request header."""

from __future__ import annotations

from tenancy.domain.entities import Entity
from tenancy.ports.repositories import IEntityRepository
from tenancy.ports.resolvers import TenancyRequest


class HeaderResolver:
    """Look up the identifier carried in a header such as ``X-Tenant``."""

    def __init__(self, repository: IEntityRepository, header: str) -> None:
        self._repository = repository
        self._header = header

    def resolve(self, request: TenancyRequest) -> Entity | None:
        if not self._header:
            return None
        value = request.header(self._header)
        if value is None:
            return None
        value = value.strip()
        if value == "":
            return None
        return self._repository.find_by_identifier(value)
