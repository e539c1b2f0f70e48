"""Chain-of-responsibility resolver."""

from __future__ import annotations

from collections.abc import Sequence

from tenancy.domain.entities import Entity
from tenancy.ports.resolvers import EntityResolver, TenancyRequest


class ChainResolver:
    """Try each resolver in order and return the first match."""

    def __init__(self, resolvers: Sequence[EntityResolver]) -> None:
        self._resolvers = list(resolvers)

    @property
    def resolvers(self) -> list[EntityResolver]:
        return list(self._resolvers)

    def resolve(self, request: TenancyRequest) -> Entity | None:
        for resolver in self._resolvers:
            entity = resolver.resolve(request)
            if entity is not None:
                return entity
        return None
