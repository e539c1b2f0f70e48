"""Resolve an entity from the first label of the request host."""

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


class SubdomainResolver:
    """Treat ``acme`` in ``acme.example.test`` as a slug.

    Hosts with fewer than three labels carry no subdomain and never resolve.
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

        labels = [label for label in host.split(".") if label]
        if len(labels) < 3:
            return None
        return self._repository.find_by_slug(labels[0])
