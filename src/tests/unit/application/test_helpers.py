"""Unit tests for the convenience helpers."""

from tenancy.application.helpers import (
    landlord_action,
    landlord_context,
    landlord_url,
    tenant_action,
    tenant_context,
    tenant_url,
)
from tenancy.application.tenancy import Tenancy
from tenancy.infrastructure.settings import TenancySettings


class TestContextHelpers:
    def test_tenant_context_prefers_argument(self, tenancy):
        assert tenancy.run_as_tenant(1, lambda: tenant_context(tenancy, 2).id) == 2

    def test_tenant_context_falls_back_to_active(self, tenancy):
        assert tenancy.run_as_tenant(1, lambda: tenant_context(tenancy).id) == 1
        assert tenancy.run_as_tenant(1, lambda: tenant_context(tenancy, "nope").id) == 1

    def test_landlord_context(self, tenancy):
        assert landlord_context(tenancy) is None
        assert landlord_context(tenancy, "south").id == 20


class TestActionHelpers:
    def test_tenant_action_with_explicit_tenant(self, tenancy):
        assert tenant_action(tenancy, tenancy.tenant_id, 3) == 3

    def test_tenant_action_reuses_active_tenant(self, tenancy, tenant_task):
        result = tenancy.run_as_tenant(
            2, lambda: tenant_action(tenancy, lambda: tenancy.tenant_depth)
        )

        assert result == 2
        assert tenant_task.made() == [2]

    def test_tenant_action_without_context_runs_as_system(self, tenancy):
        assert tenant_action(tenancy, lambda: tenancy.tenant_depth) == 1

    def test_landlord_action(self, tenancy):
        assert landlord_action(tenancy, tenancy.landlord_id, 10) == 10
        assert landlord_action(tenancy, lambda: tenancy.landlord_depth) == 1
        assert tenancy.run_as_landlord(
            20, lambda: landlord_action(tenancy, tenancy.landlord_id)
        ) == 20


class TestUrlHelpers:
    def test_tenant_url_uses_first_domain_and_app_scheme(self, tenants, landlords):
        settings = TenancySettings(_env_file=None, app_url="https://app.example.test")
        engine = Tenancy(tenants=tenants, landlords=landlords, settings=settings)

        assert tenant_url(engine, 1, "billing") == "https://acme.test/billing"

    def test_tenant_url_without_domains_uses_app_url(self, tenancy):
        assert tenant_url(tenancy, 3, "/billing") == "http://localhost/billing"

    def test_tenant_url_without_tenant(self, tenancy):
        assert tenant_url(tenancy) == "http://localhost/"

    def test_tenant_url_strips_path_from_domain(self, tenancy, tenants):
        tenants.find_by_id(2).domains = ["globex.test/app"]

        assert tenant_url(tenancy, 2) == "http://globex.test/"

    def test_landlord_url_for_active_landlord(self, tenancy):
        assert tenancy.run_as_landlord(
            "north", lambda: landlord_url(tenancy, path="/admin")
        ) == "http://north.test/admin"
