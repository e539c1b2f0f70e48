"""Unit tests for tenancy value objects."""

import pytest

from tenancy.domain.entities import DatabaseAwareEntity, LandlordAwareTenant, Tenant
from tenancy.domain.value_objects import (
    ById,
    BySlug,
    LandlordContext,
    TenantContext,
    identifier_candidates,
)


class TestIdentifierCandidates:
    def test_int_is_primary_key_only(self):
        assert identifier_candidates(42) == [ById(42)]

    def test_string_tries_slug_first(self):
        assert identifier_candidates("42") == [BySlug("42"), ById("42")]

    def test_explicit_identifier_is_used_as_is(self):
        assert identifier_candidates(BySlug("acme")) == [BySlug("acme")]
        assert identifier_candidates(ById(1)) == [ById(1)]

    @pytest.mark.parametrize("value", ["", None, True, 1.5, ["acme"]])
    def test_unusable_values(self, value):
        assert identifier_candidates(value) == []


class TestEntityContext:
    def test_payload_id_and_slug_win(self, fake_tenant):
        tenant = fake_tenant(1, "acme", name="Acme", data={"id": 99, "slug": "x", "plan": "pro"})

        payload = TenantContext(tenant).payload()

        assert payload["id"] == 1
        assert payload["slug"] == "acme"
        assert payload["plan"] == "pro"
        assert payload["name"] == "Acme"

    def test_same_entity_compares_ids(self, fake_tenant):
        context = TenantContext(fake_tenant(1, "acme"))

        assert context.same_entity(TenantContext(fake_tenant(1, "renamed")))
        assert not context.same_entity(TenantContext(fake_tenant(2, "acme")))
        assert not context.same_entity(None)

    def test_contexts_expose_their_entity(self, fake_tenant, fake_landlord):
        tenant = fake_tenant(1, "acme")
        landlord = fake_landlord(10, "north")

        assert TenantContext(tenant).tenant is tenant
        assert LandlordContext(landlord).landlord is landlord
        assert LandlordContext(landlord).id == 10


class TestEntityProtocols:
    def test_fakes_satisfy_protocols(self, fake_tenant, payload_only_tenant):
        tenant = fake_tenant(1, "acme")

        assert isinstance(tenant, Tenant)
        assert isinstance(tenant, LandlordAwareTenant)
        assert isinstance(tenant, DatabaseAwareEntity)
        assert not isinstance(payload_only_tenant(2, "globex"), LandlordAwareTenant)
