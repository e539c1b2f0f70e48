"""Request resolvers.

Each resolver maps a ``TenancyRequest`` to an entity or None. One class
serves both tenants and landlords; the repository (and, where a principal
or session value may already be an entity, the ``entity_type`` predicate)
decides which kind is resolved.
"""

from tenancy.application.resolvers.authenticated import AuthenticatedResolver
from tenancy.application.resolvers.chain import ChainResolver
from tenancy.application.resolvers.domain import DomainResolver
from tenancy.application.resolvers.header import HeaderResolver
from tenancy.application.resolvers.path import PathResolver
from tenancy.application.resolvers.session import SessionResolver
from tenancy.application.resolvers.subdomain import SubdomainResolver

__all__ = [
    "AuthenticatedResolver",
    "ChainResolver",
    "DomainResolver",
    "HeaderResolver",
    "PathResolver",
    "SessionResolver",
    "SubdomainResolver",
]
