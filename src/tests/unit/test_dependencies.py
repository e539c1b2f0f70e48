"""Unit tests for tenancy wiring."""

from types import SimpleNamespace

import pytest

from tenancy.application.request import SimpleRequest
from tenancy.application.resolvers import (
    AuthenticatedResolver,
    DomainResolver,
    HeaderResolver,
    PathResolver,
    SessionResolver,
    SubdomainResolver,
)
from tenancy.dependencies import (
    build_impersonation,
    build_repositories,
    build_resolver,
    build_scheduler,
    build_tasks,
    build_tenancy,
)
from tenancy.domain.value_objects import IsolationMode
from tenancy.infrastructure.cache import CacheManager
from tenancy.infrastructure.database.connections import ConnectionManager
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.runtime_config import RuntimeConfig
from tenancy.infrastructure.settings import ResolverSettings, TenancySettings
from tenancy.infrastructure.tasks import MapConfigTask, PrefixCacheTask, SwitchDatabaseTask
from tenancy.ports.exceptions import InvalidTenancyConfiguration


class TestBuildResolver:
    def test_builds_chain_in_configured_order(self, entity_repository):
        settings = ResolverSettings(
            resolvers=["header", "session", "domain", "path", "subdomain", "authenticated"]
        )

        chain = build_resolver(entity_repository(), settings)

        assert [type(r) for r in chain.resolvers] == [
            HeaderResolver,
            SessionResolver,
            DomainResolver,
            PathResolver,
            SubdomainResolver,
            AuthenticatedResolver,
        ]

    def test_unknown_resolver(self, entity_repository):
        with pytest.raises(InvalidTenancyConfiguration, match=r"Unknown tenancy resolver \[cookie\]"):
            build_resolver(entity_repository(), ResolverSettings(resolvers=["cookie"]))

    def test_empty_chain_resolves_nothing(self, entity_repository):
        chain = build_resolver(entity_repository(), ResolverSettings(resolvers=[]))

        assert chain.resolve(SimpleRequest(host="acme.test")) is None

    def test_entity_type_defaults_to_repository_model(self, db_session, settings):
        tenants, _ = build_repositories(db_session, settings)
        tenant = tenants.create({"slug": "acme"})
        chain = build_resolver(tenants, ResolverSettings(resolvers=["session"]))

        assert chain.resolve(SimpleRequest(session={"tenant": tenant})) is tenant
        assert chain.resolve(SimpleRequest(session={"tenant": "acme"})) is tenant
        assert chain.resolve(SimpleRequest(session={"tenant": SimpleNamespace(id=1)})) is None


class TestBuildTasks:
    def test_builds_tasks_in_order(self):
        tasks = build_tasks(
            ["map_config", "prefix_cache", "switch_database"],
            isolation=IsolationMode.SEPARATE_DATABASE,
            connections=ConnectionManager({"central": "sqlite://"}, "central"),
            cache=CacheManager(),
            config=RuntimeConfig(),
        )

        assert [type(t) for t in tasks] == [MapConfigTask, PrefixCacheTask, SwitchDatabaseTask]

    def test_unknown_task(self):
        with pytest.raises(InvalidTenancyConfiguration, match=r"Unknown tenancy task \[migrate\]"):
            build_tasks(["migrate"], isolation=IsolationMode.SHARED_DATABASE)

    @pytest.mark.parametrize(
        ("name", "collaborator"),
        [
            ("switch_database", "ConnectionManager"),
            ("prefix_cache", "CacheManager"),
            ("map_config", "RuntimeConfig"),
        ],
    )
    def test_missing_collaborator(self, name, collaborator):
        with pytest.raises(InvalidTenancyConfiguration, match=collaborator):
            build_tasks([name], isolation=IsolationMode.SHARED_DATABASE)


class TestBuildTenancy:
    def test_wires_tasks_and_resolvers_from_settings(self, db_session):
        settings = TenancySettings(_env_file=None, tasks=["prefix_cache"])
        cache = CacheManager()
        tenants, landlords = build_repositories(db_session, settings, cache)
        tenant = tenants.create({"slug": "acme", "domains": ["acme.test"]})

        tenancy = build_tenancy(tenants, landlords, settings, cache=cache)

        assert [type(t) for t in tenancy.tenant_tasks] == [PrefixCacheTask]
        assert tenancy.landlord_tasks == []
        context = tenancy.resolve_tenant(SimpleRequest(host="acme.test"))
        assert context.entity is tenant
        assert cache.prefix == f"tenant:{tenant.id}"

    def test_default_tasks_require_collaborators(self, entity_repository):
        with pytest.raises(InvalidTenancyConfiguration):
            build_tenancy(entity_repository(), settings=TenancySettings(_env_file=None))

    def test_scheduler_and_impersonation_use_engine_settings(self, entity_repository):
        settings = TenancySettings(
            _env_file=None,
            tasks=[],
            scheduler={"fail_fast": False},
            impersonation={"query_parameter": "as"},
        )
        tenancy = build_tenancy(entity_repository(), settings=settings)

        assert build_scheduler(tenancy).fail_fast is False
        assert build_impersonation(tenancy, CacheManager()).query_parameter() == "as"

    def test_tenant_models_are_recognised(self, db_session, settings):
        tenants, _ = build_repositories(db_session, settings)
        tenant = tenants.create({"slug": "acme"})

        assert isinstance(tenant, TenantModel)
        assert tenants.model is TenantModel


class TestTasksOnBothStacks:
    """Tenant and landlord tasks sharing one set of collaborators."""

    @pytest.fixture
    def connections(self):
        return ConnectionManager(
            {"central": "sqlite://", "tenant_db": "sqlite://", "landlord_db": "sqlite://"},
            "central",
        )

    @pytest.fixture
    def cache(self):
        return CacheManager()

    @pytest.fixture
    def config(self):
        return RuntimeConfig({"app": {"owner": "central"}})

    @pytest.fixture
    def tenancy(self, tenants, landlords, connections, cache, config):
        tasks = ["prefix_cache", "switch_database", "map_config"]
        settings = TenancySettings(
            _env_file=None,
            isolation=IsolationMode.SEPARATE_DATABASE,
            database={"connection": "tenant_db"},
            tasks=tasks,
            config_mapping={"mappings": {"app.owner": "name"}},
            landlord={
                "isolation": IsolationMode.SEPARATE_DATABASE,
                "database": {"connection": "landlord_db"},
                "tasks": tasks,
                "config_mapping": {"mappings": {"app.owner": "name"}},
            },
        )
        return build_tenancy(
            tenants,
            landlords,
            settings,
            connections=connections,
            cache=cache,
            config=config,
        )

    def _snapshot(self, connections, cache, config):
        return (connections.default, cache.prefix, config.get("app.owner"))

    def test_run_as_tenant_restores_central_values(self, tenancy, connections, cache, config):
        inside = tenancy.run_as_tenant(
            1, lambda: (self._snapshot(connections, cache, config), tenancy.landlord_id())
        )

        assert inside == (("tenant_db", "tenant:1", "Acme"), 10)
        assert tenancy.current_tenant() is None
        assert tenancy.current_landlord() is None
        assert self._snapshot(connections, cache, config) == ("central", "", "central")

    def test_run_as_landlord_applies_landlord_values(
        self, tenancy, connections, cache, config
    ):
        inside = tenancy.run_as_landlord(
            10, lambda: self._snapshot(connections, cache, config)
        )

        assert inside == ("landlord_db", "landlord:10", "North")
        assert self._snapshot(connections, cache, config) == ("central", "", "central")

    def test_landlord_values_return_after_nested_tenant(
        self, tenancy, connections, cache, config
    ):
        def inside_landlord():
            tenant = tenancy.run_as_tenant(
                1, lambda: self._snapshot(connections, cache, config)
            )
            return tenant, self._snapshot(connections, cache, config)

        tenant, landlord = tenancy.run_as_landlord(10, inside_landlord)

        assert tenant == ("tenant_db", "tenant:1", "Acme")
        assert landlord == ("landlord_db", "landlord:10", "North")
        assert self._snapshot(connections, cache, config) == ("central", "", "central")


class TestBuildTasksScope:
    def test_unknown_scope(self):
        with pytest.raises(InvalidTenancyConfiguration, match=r"Unknown task scope \[global\]"):
            build_tasks([], isolation=IsolationMode.SHARED_DATABASE, scope="global")
