"""Resolve an entity from the full request host."""

from __future__ import annotations

from collections.abc import Iterable

from tenancy.application.resolvers.central_domains import (
    is_central_domain,
    normalize_central_domains,
)
from tenancy.domain.entities import Entity
from tenancy.ports.repositories import IEntityRepository
from tenancy.ports.resolvers import TenancyRequest
from tenancy.shared_kernel.domain_normalizer import normalize_domain


class DomainResolver:
    """Match the request host against the entities' domain lists.

    Central domains (and their subdomains) never resolve, so the
    application's own marketing or admin hosts stay unscoped.
    """

    def __init__(
        self, repository: IEntityRepository, central_domains: Iterable[str] = ()
    ) -> None:
        self._repository = repository
        self._central_domains = normalize_central_domains(central_domains)

    def resolve(self, request: TenancyRequest) -> Entity | None:
        host = normalize_domain(request.host)
        if host is None or is_central_domain(host, self._central_domains):
            return None
        return self._repository.find_by_domain(host)
