"""Unit tests for tenancy settings."""

import pytest
from pydantic import ValidationError

from tenancy.domain.value_objects import IsolationMode
from tenancy.infrastructure.settings import ResolverSettings, TenancySettings


class TestTenancySettingsDefaults:
    def test_defaults(self):
        settings = TenancySettings(_env_file=None)

        assert settings.isolation is IsolationMode.SHARED_DATABASE
        assert settings.tasks == ["switch_database", "prefix_cache"]
        assert settings.resolver.resolvers == [
            "domain",
            "subdomain",
            "path",
            "authenticated",
            "session",
        ]
        assert settings.context.require_resolved is True
        assert settings.scheduler.fail_fast is True
        assert settings.impersonation.ttl_seconds == 300
        assert settings.http.abort_status == 404

    def test_landlord_defaults_mirror_tenant_sections(self):
        landlord = TenancySettings(_env_file=None).landlord

        assert landlord.resolver.header == "X-Landlord"
        assert landlord.resolver.session_key == "landlord"
        assert landlord.cache.prefix == "landlord"
        assert landlord.queue.prefix == "landlord"
        assert landlord.domain_lookup.cache.prefix == "tenancy:domain:landlord:"
        assert landlord.payload_key == "landlord_id"
        assert landlord.sync_with_tenant is True
        assert landlord.tasks == []


class TestTenancySettingsEnvironment:
    def test_reads_prefixed_and_nested_variables(self, monkeypatch):
        monkeypatch.setenv("TENANCY_ISOLATION", "separate-database")
        monkeypatch.setenv("TENANCY_TASKS", '["map_config"]')
        monkeypatch.setenv("TENANCY_CONTEXT__REQUIRE_RESOLVED", "false")
        monkeypatch.setenv("TENANCY_LANDLORD__SYNC_WITH_TENANT", "false")
        monkeypatch.setenv("TENANCY_RESOLVER__HEADER", "X-Org")

        settings = TenancySettings(_env_file=None)

        assert settings.isolation is IsolationMode.SEPARATE_DATABASE
        assert settings.tasks == ["map_config"]
        assert settings.context.require_resolved is False
        assert settings.landlord.sync_with_tenant is False
        assert settings.resolver.header == "X-Org"

    def test_rejects_unknown_isolation(self, monkeypatch):
        monkeypatch.setenv("TENANCY_ISOLATION", "per-table")

        with pytest.raises(ValidationError):
            TenancySettings(_env_file=None)

    def test_rejects_empty_cache_prefix(self, monkeypatch):
        monkeypatch.setenv("TENANCY_CACHE__PREFIX", "")

        with pytest.raises(ValidationError):
            TenancySettings(_env_file=None)


class TestResolverSettings:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, 1), (3, 3), ("2", 2), (" 4 ", 4), (0, 1), (-2, 1), ("abc", 1), ("", 1)],
    )
    def test_segment_index(self, value, expected):
        assert ResolverSettings(path_segment=value).segment_index == expected
