"""Multi-tenant context management.

Keeps an explicit stack of the active tenant and landlord, resolves them
from inbound requests and runs reversible setup and teardown tasks on
every switch.

Example:
    tenancy = build_tenancy(tenants, landlords, settings, cache=cache)
    tenancy.run_as_tenant("acme", send_invoices)
"""

from tenancy.application import ImpersonationManager, SimpleRequest, Tenancy, TenancyScheduler
from tenancy.dependencies import build_impersonation, build_scheduler, build_tenancy
from tenancy.domain import LandlordContext, TenantContext
from tenancy.ports.exceptions import (
    InconsistentTenantLandlordContext,
    InvalidTenancyConfiguration,
    TenancyError,
    UnresolvedLandlordContext,
    UnresolvedTenantContext,
)

__all__ = [
    "ImpersonationManager",
    "InconsistentTenantLandlordContext",
    "InvalidTenancyConfiguration",
    "LandlordContext",
    "SimpleRequest",
    "Tenancy",
    "TenancyError",
    "TenancyScheduler",
    "TenantContext",
    "UnresolvedLandlordContext",
    "UnresolvedTenantContext",
    "build_impersonation",
    "build_scheduler",
    "build_tenancy",
]
