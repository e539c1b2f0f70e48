"""Tenancy settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults.
Nested sections are addressed with a double underscore, for example
``TENANCY_CONTEXT__REQUIRE_RESOLVED=false`` or
``TENANCY_LANDLORD__SYNC_WITH_TENANT=false``.

The engine never reads settings from a global: ``get_tenancy_settings`` is
a convenience for hosts, which then pass the instance in explicitly.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tenancy.domain.value_objects import IsolationMode

DEFAULT_RESOLVERS = ["domain", "subdomain", "path", "authenticated", "session"]


class ResolverSettings(BaseModel):
    """Request resolution settings for one entity kind."""

    resolvers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RESOLVERS),
        description="Resolver names, tried in order",
    )
    header: str = Field(default="X-Tenant", description="Header carrying an identifier")
    central_domains: list[str] = Field(
        default_factory=list,
        description="Domains (and their subdomains) that never resolve to an entity",
    )
    path_segment: int | str = Field(
        default=1, description="1-based path segment holding an identifier"
    )
    session_key: str = Field(default="tenant", description="Session key to read")
    user_attribute: str | None = Field(
        default=None,
        description="Dot-path on the authenticated principal holding the entity or its id",
    )

    @property
    def segment_index(self) -> int:
        """Configured path segment, falling back to 1 when not a positive number."""
        value = self.path_segment
        if isinstance(value, str):
            value = value.strip()
            if not value.isdigit():
                return 1
            value = int(value)
        return value if value >= 1 else 1


class DatabaseConnectionSettings(BaseModel):
    """Fallback connection used by the database switching task."""

    connection: str | None = Field(default=None, description="Connection name")


class ConfigMappingSettings(BaseModel):
    """Runtime configuration keys filled from the active context payload.

    Keys are dot-paths into the runtime configuration, values are dot-paths
    into the context payload.
    """

    mappings: dict[str, str] = Field(default_factory=dict)


class CachePrefixSettings(BaseModel):
    """Cache key prefix applied while a context is active."""

    prefix: str = Field(default="tenant", min_length=1)
    delimiter: str = Field(default=":", min_length=1)


class DomainLookupCacheSettings(BaseModel):
    """Read-through cache for domain lookups."""

    enabled: bool = Field(default=False)
    ttl_seconds: int = Field(default=60, ge=1)
    store: str | None = Field(default=None, description="Named cache store")
    prefix: str = Field(default="tenancy:domain:tenant:", min_length=1)


class DomainLookupSettings(BaseModel):
    """Domain lookup strategy settings."""

    use_table: bool = Field(default=True, description="Consult the flat lookup table")
    cache: DomainLookupCacheSettings = Field(default_factory=DomainLookupCacheSettings)


class QueueSettings(BaseModel):
    """Scoped queue naming."""

    prefix: str = Field(default="tenant", min_length=1)
    delimiter: str = Field(default=":", min_length=1)


class ContextSettings(BaseModel):
    """Context stack policies."""

    require_resolved: bool = Field(
        default=True,
        description="Raise for unresolvable run_as_* values instead of using system scope",
    )
    enforce_coherence: bool = Field(
        default=True,
        description="Reject landlords that do not own the active tenant",
    )


class LandlordSettings(BaseModel):
    """Landlord-side settings mirroring the tenant-side sections."""

    isolation: IsolationMode = Field(default=IsolationMode.SHARED_DATABASE)
    database: DatabaseConnectionSettings = Field(
        default_factory=DatabaseConnectionSettings
    )
    resolver: ResolverSettings = Field(
        default_factory=lambda: ResolverSettings(
            header="X-Landlord", session_key="landlord"
        )
    )
    tasks: list[str] = Field(default_factory=list)
    config_mapping: ConfigMappingSettings = Field(default_factory=ConfigMappingSettings)
    cache: CachePrefixSettings = Field(
        default_factory=lambda: CachePrefixSettings(prefix="landlord")
    )
    domain_lookup: DomainLookupSettings = Field(
        default_factory=lambda: DomainLookupSettings(
            cache=DomainLookupCacheSettings(prefix="tenancy:domain:landlord:")
        )
    )
    queue: QueueSettings = Field(default_factory=lambda: QueueSettings(prefix="landlord"))
    payload_key: str = Field(
        default="landlord_id",
        min_length=1,
        description="Tenant payload key holding the owning landlord's id",
    )
    sync_with_tenant: bool = Field(
        default=True,
        description="Push the owning landlord whenever a tenant is pushed",
    )


class SchedulerSettings(BaseModel):
    """Fan-out scheduler settings."""

    fail_fast: bool = Field(
        default=True,
        description="Stop at the first failing entity instead of collecting",
    )


class ImpersonationSettings(BaseModel):
    """Single-use impersonation token settings."""

    ttl_seconds: int = Field(default=300, ge=1)
    cache_store: str | None = Field(default=None)
    cache_prefix: str = Field(default="tenancy:impersonation:tenant:", min_length=1)
    query_parameter: str = Field(default="tenant_impersonation", min_length=1)


class HttpSettings(BaseModel):
    """Values consumed by the host's HTTP layer."""

    abort_status: int = Field(default=404, description="Status for resolution misses")


class RoutingSettings(BaseModel):
    """Route parameter names filled with the active context's slug."""

    tenant_parameter: str = "tenant"
    landlord_parameter: str = "landlord"


class TenancySettings(BaseSettings):
    """Main tenancy settings aggregating all configuration sections.

    Environment variables:
        TENANCY_ISOLATION: shared-database | separate-schema | separate-database
        TENANCY_TASKS: JSON list of task names (default: switch_database, prefix_cache)
        TENANCY_RESOLVER__RESOLVERS: JSON list of resolver names
        TENANCY_CONTEXT__REQUIRE_RESOLVED: Raise on unresolved run_as_* (default: true)
        TENANCY_CONTEXT__ENFORCE_COHERENCE: Reject foreign landlords (default: true)
        TENANCY_LANDLORD__SYNC_WITH_TENANT: Push landlord with tenant (default: true)
        TENANCY_SCHEDULER__FAIL_FAST: Stop at first failure (default: true)
        TENANCY_IMPERSONATION__TTL_SECONDS: Token lifetime (default: 300)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_url: str = Field(default="http://localhost", description="Base URL of the app")
    isolation: IsolationMode = Field(default=IsolationMode.SHARED_DATABASE)
    database: DatabaseConnectionSettings = Field(
        default_factory=DatabaseConnectionSettings
    )
    tasks: list[str] = Field(
        default_factory=lambda: ["switch_database", "prefix_cache"],
        description="Tenant task names, run in order",
    )
    config_mapping: ConfigMappingSettings = Field(default_factory=ConfigMappingSettings)
    cache: CachePrefixSettings = Field(default_factory=CachePrefixSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    context: ContextSettings = Field(default_factory=ContextSettings)
    landlord: LandlordSettings = Field(default_factory=LandlordSettings)
    domain_lookup: DomainLookupSettings = Field(default_factory=DomainLookupSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    impersonation: ImpersonationSettings = Field(default_factory=ImpersonationSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return TenancySettings()
