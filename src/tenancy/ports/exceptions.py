"""Exceptions raised by the tenancy package.

Resolution misses are never exceptions; they are returned as ``None``.
The classes below signal contract violations that the caller must handle.
"""

from __future__ import annotations

from typing import Any


class TenancyError(Exception):
    """Base class for every tenancy exception."""

    pass


class UnresolvedTenantContext(TenancyError):
    """Raised when a value passed to ``run_as_tenant`` names no tenant.

    Only raised while ``context.require_resolved`` is enabled; otherwise the
    callback runs in system scope instead.
    """

    @classmethod
    def for_identifier(cls, identifier: Any) -> UnresolvedTenantContext:
        if isinstance(identifier, (int, str)) and not isinstance(identifier, bool):
            return cls(
                f"Unable to resolve tenant context for identifier [{identifier}]."
            )
        return cls("Unable to resolve tenant context.")


class UnresolvedLandlordContext(TenancyError):
    """Raised when a value passed to ``run_as_landlord`` names no landlord."""

    @classmethod
    def for_identifier(cls, identifier: Any) -> UnresolvedLandlordContext:
        if isinstance(identifier, (int, str)) and not isinstance(identifier, bool):
            return cls(
                f"Unable to resolve landlord context for identifier [{identifier}]."
            )
        return cls("Unable to resolve landlord context.")


class InconsistentTenantLandlordContext(TenancyError):
    """Raised when a landlord is activated that does not own the active tenant.

    Never suppressed: it signals either a programming error or an attempt
    to reach another landlord's data from inside a tenant scope.
    """

    def __init__(
        self,
        message: str,
        tenant_id: Any = None,
        expected_landlord_id: Any = None,
        actual_landlord_id: Any = None,
    ):
        super().__init__(message)
        self.tenant_id = tenant_id
        self.expected_landlord_id = expected_landlord_id
        self.actual_landlord_id = actual_landlord_id

    @classmethod
    def for_identifiers(
        cls,
        tenant_id: Any,
        expected_landlord_id: Any,
        actual_landlord_id: Any,
    ) -> InconsistentTenantLandlordContext:
        return cls(
            f"Tenant context [{tenant_id}] expects landlord "
            f"[{expected_landlord_id}], got [{actual_landlord_id}].",
            tenant_id=tenant_id,
            expected_landlord_id=expected_landlord_id,
            actual_landlord_id=actual_landlord_id,
        )


class InvalidTenancyConfiguration(TenancyError):
    """Raised at wiring time for unknown resolver or task names."""

    pass
