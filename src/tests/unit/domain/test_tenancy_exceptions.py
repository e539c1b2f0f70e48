"""Unit tests for tenancy exceptions."""

from tenancy.ports.exceptions import (
    InconsistentTenantLandlordContext,
    TenancyError,
    UnresolvedLandlordContext,
    UnresolvedTenantContext,
)


class TestUnresolvedContexts:
    def test_message_names_scalar_identifiers(self):
        error = UnresolvedTenantContext.for_identifier("acme")

        assert str(error) == "Unable to resolve tenant context for identifier [acme]."
        assert isinstance(error, TenancyError)

    def test_message_omits_other_values(self):
        assert str(UnresolvedTenantContext.for_identifier(object())) == (
            "Unable to resolve tenant context."
        )
        assert str(UnresolvedLandlordContext.for_identifier(True)) == (
            "Unable to resolve landlord context."
        )

    def test_landlord_message(self):
        assert str(UnresolvedLandlordContext.for_identifier(10)) == (
            "Unable to resolve landlord context for identifier [10]."
        )


class TestInconsistentTenantLandlordContext:
    def test_carries_identifiers(self):
        error = InconsistentTenantLandlordContext.for_identifiers(1, 10, 20)

        assert str(error) == "Tenant context [1] expects landlord [10], got [20]."
        assert error.tenant_id == 1
        assert error.expected_landlord_id == 10
        assert error.actual_landlord_id == 20
