"""Composition of the tenancy package.

Turns ``TenancySettings`` into wired resolvers, tasks and engine
instances. Hosts call these once per unit of work (``build_tenancy``) or
once per process (the cache, connections and runtime config they pass in).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from sqlalchemy.orm import Session

from tenancy.application.impersonation import ImpersonationManager
from tenancy.application.observability import TenancyProbe
from tenancy.application.resolvers import (
    AuthenticatedResolver,
    ChainResolver,
    DomainResolver,
    HeaderResolver,
    PathResolver,
    SessionResolver,
    SubdomainResolver,
)
from tenancy.application.scheduler import TenancyScheduler
from tenancy.application.tenancy import Tenancy
from tenancy.domain.value_objects import IsolationMode
from tenancy.infrastructure.cache import CacheManager
from tenancy.infrastructure.database.connections import ConnectionManager
from tenancy.infrastructure.observability import DomainLookupProbe
from tenancy.infrastructure.repositories import LandlordRepository, TenantRepository
from tenancy.infrastructure.runtime_config import RuntimeConfig
from tenancy.infrastructure.settings import (
    CachePrefixSettings,
    ResolverSettings,
    TenancySettings,
)
from tenancy.infrastructure.tasks import (
    MapConfigTask,
    PrefixCacheTask,
    SwitchDatabaseTask,
)
from tenancy.ports.events import EventDispatcher
from tenancy.ports.exceptions import InvalidTenancyConfiguration
from tenancy.ports.repositories import IEntityRepository, ILandlordRepository, ITenantRepository
from tenancy.ports.resolvers import EntityResolver
from tenancy.ports.tasks import ContextTask
from tenancy.shared_kernel.scoped_overrides import OVERRIDE_SCOPES

EntityPredicate = Callable[[Any], bool]

RESOLVER_NAMES = ("domain", "subdomain", "path", "header", "authenticated", "session")
TASK_NAMES = ("switch_database", "prefix_cache", "map_config")


def build_repositories(
    session: Session,
    settings: TenancySettings,
    cache: CacheManager | None = None,
    probe: DomainLookupProbe | None = None,
) -> tuple[TenantRepository, LandlordRepository]:
    """Build the SQLAlchemy tenant and landlord repositories for ``session``."""
    return (
        TenantRepository(session, settings, cache=cache, probe=probe),
        LandlordRepository(session, settings, cache=cache, probe=probe),
    )


def build_resolver(
    repository: IEntityRepository,
    settings: ResolverSettings,
    entity_type: EntityPredicate | None = None,
) -> ChainResolver:
    """Build the resolver chain named by ``settings.resolvers``, in order.

    Raises:
        InvalidTenancyConfiguration: A resolver name is unknown
    """
    is_entity = entity_type or _entity_predicate(repository)
    resolvers: list[EntityResolver] = []
    for name in settings.resolvers:
        if name == "domain":
            resolvers.append(DomainResolver(repository, settings.central_domains))
        elif name == "subdomain":
            resolvers.append(SubdomainResolver(repository, settings.central_domains))
        elif name == "path":
            resolvers.append(PathResolver(repository, settings.segment_index))
        elif name == "header":
            resolvers.append(HeaderResolver(repository, settings.header))
        elif name == "authenticated":
            resolvers.append(
                AuthenticatedResolver(repository, is_entity, settings.user_attribute)
            )
        elif name == "session":
            resolvers.append(SessionResolver(repository, is_entity, settings.session_key))
        else:
            raise InvalidTenancyConfiguration(
                f"Unknown tenancy resolver [{name}]. "
                f"Expected one of: {', '.join(RESOLVER_NAMES)}."
            )
    return ChainResolver(resolvers)


def build_tasks(
    names: Sequence[str],
    *,
    isolation: IsolationMode,
    fallback_connection: str | None = None,
    cache_prefix: CachePrefixSettings | None = None,
    mappings: dict[str, str] | None = None,
    connections: ConnectionManager | None = None,
    cache: CacheManager | None = None,
    config: RuntimeConfig | None = None,
    scope: str = "tenant",
) -> list[ContextTask]:
    """Build the tasks named by ``names``, in order.

    ``scope`` ("tenant" or "landlord") selects which override slot the
    tasks write on the shared connection, cache and config collaborators.

    Raises:
        InvalidTenancyConfiguration: The scope or a task name is unknown,
            or a task is named whose collaborator was not provided
    """
    if scope not in OVERRIDE_SCOPES:
        raise InvalidTenancyConfiguration(
            f"Unknown task scope [{scope}]. "
            f"Expected one of: {', '.join(OVERRIDE_SCOPES)}."
        )

    tasks: list[ContextTask] = []
    for name in names:
        if name == "switch_database":
            if connections is None:
                raise InvalidTenancyConfiguration(
                    "Task [switch_database] requires a ConnectionManager."
                )
            tasks.append(
                SwitchDatabaseTask(connections, isolation, fallback_connection, scope)
            )
        elif name == "prefix_cache":
            if cache is None:
                raise InvalidTenancyConfiguration(
                    "Task [prefix_cache] requires a CacheManager."
                )
            tasks.append(PrefixCacheTask(cache, cache_prefix, scope))
        elif name == "map_config":
            if config is None:
                raise InvalidTenancyConfiguration(
                    "Task [map_config] requires a RuntimeConfig."
                )
            tasks.append(MapConfigTask(config, mappings, scope))
        else:
            raise InvalidTenancyConfiguration(
                f"Unknown tenancy task [{name}]. "
                f"Expected one of: {', '.join(TASK_NAMES)}."
            )
    return tasks


def build_tenancy(
    tenants: ITenantRepository,
    landlords: ILandlordRepository | None = None,
    settings: TenancySettings | None = None,
    *,
    connections: ConnectionManager | None = None,
    cache: CacheManager | None = None,
    config: RuntimeConfig | None = None,
    events: EventDispatcher | None = None,
    probe: TenancyProbe | None = None,
    tenant_type: EntityPredicate | None = None,
    landlord_type: EntityPredicate | None = None,
) -> Tenancy:
    """Build a ``Tenancy`` engine for one unit of work.

    Args:
        tenants: Tenant repository
        landlords: Landlord repository, if landlords are used
        settings: Tenancy settings; defaults are used when omitted
        connections: Connection manager for ``switch_database``
        cache: Cache manager for ``prefix_cache``
        config: Runtime configuration for ``map_config``
        events: Event sink for lifecycle events
        probe: Optional domain probe for observability
        tenant_type: Predicate recognising tenant entities in sessions and
            principals; derived from the repository model when omitted
        landlord_type: Landlord counterpart of ``tenant_type``
    """
    settings = settings or TenancySettings()

    tenant_tasks = build_tasks(
        settings.tasks,
        isolation=settings.isolation,
        fallback_connection=settings.database.connection,
        cache_prefix=settings.cache,
        mappings=settings.config_mapping.mappings,
        connections=connections,
        cache=cache,
        config=config,
        scope="tenant",
    )
    landlord_tasks = build_tasks(
        settings.landlord.tasks,
        isolation=settings.landlord.isolation,
        fallback_connection=settings.landlord.database.connection,
        cache_prefix=settings.landlord.cache,
        mappings=settings.landlord.config_mapping.mappings,
        connections=connections,
        cache=cache,
        config=config,
        scope="landlord",
    )

    landlord_resolver = None
    if landlords is not None:
        landlord_resolver = build_resolver(
            landlords, settings.landlord.resolver, landlord_type
        )

    return Tenancy(
        tenants=tenants,
        landlords=landlords,
        settings=settings,
        tenant_resolver=build_resolver(tenants, settings.resolver, tenant_type),
        landlord_resolver=landlord_resolver,
        tenant_tasks=tenant_tasks,
        landlord_tasks=landlord_tasks,
        events=events,
        probe=probe,
    )


def build_scheduler(tenancy: Tenancy) -> TenancyScheduler:
    return TenancyScheduler(tenancy, tenancy.settings.scheduler)


def build_impersonation(tenancy: Tenancy, cache: CacheManager) -> ImpersonationManager:
    return ImpersonationManager(tenancy, cache, tenancy.settings.impersonation)


def _entity_predicate(repository: IEntityRepository) -> EntityPredicate:
    model = getattr(repository, "model", None)
    if isinstance(model, type):
        return lambda value: isinstance(value, model)
    return lambda value: False
