"""Convenience functions over a ``Tenancy`` instance.

These mirror the engine's own lookups but fall back to the active
context, which is what call sites inside a scoped block usually want.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar
from urllib.parse import urlsplit

from tenancy.application.tenancy import LandlordLike, Tenancy, TenantLike
from tenancy.domain.value_objects import EntityContext, LandlordContext, TenantContext

T = TypeVar("T")


def tenant_context(
    tenancy: Tenancy, tenant: TenantLike | None = None
) -> TenantContext | None:
    """Return the context for ``tenant``, or the active tenant when it does not resolve."""
    return tenancy.tenant(tenant) or tenancy.current_tenant()


def landlord_context(
    tenancy: Tenancy, landlord: LandlordLike | None = None
) -> LandlordContext | None:
    """Return the context for ``landlord``, or the active landlord when it does not resolve."""
    return tenancy.landlord(landlord) or tenancy.current_landlord()


def tenant_action(
    tenancy: Tenancy, callback: Callable[[], T], tenant: TenantLike | None = None
) -> T:
    """Run ``callback`` as ``tenant``, as the active tenant, or in system scope."""
    if tenant is not None:
        return tenancy.run_as_tenant(tenant, callback)

    current = tenancy.current_tenant()
    if current is not None:
        return tenancy.run_as_tenant(current, callback)

    return tenancy.run_as_system(callback)


def landlord_action(
    tenancy: Tenancy, callback: Callable[[], T], landlord: LandlordLike | None = None
) -> T:
    """Run ``callback`` as ``landlord``, as the active landlord, or in system scope."""
    if landlord is not None:
        return tenancy.run_as_landlord(landlord, callback)

    current = tenancy.current_landlord()
    if current is not None:
        return tenancy.run_as_landlord(current, callback)

    return tenancy.run_as_system(callback)


def tenant_url(
    tenancy: Tenancy, tenant: TenantLike | None = None, path: str = "/"
) -> str:
    """Absolute URL for ``path`` on the tenant's first domain.

    Falls back to the application URL when no tenant applies or the tenant
    has no domains.
    """
    return _entity_url(tenancy, tenant_context(tenancy, tenant), path)


def landlord_url(
    tenancy: Tenancy, landlord: LandlordLike | None = None, path: str = "/"
) -> str:
    """Absolute URL for ``path`` on the landlord's first domain."""
    return _entity_url(tenancy, landlord_context(tenancy, landlord), path)


def _entity_url(tenancy: Tenancy, context: EntityContext | None, path: str) -> str:
    clean_path = "/" + path.lstrip("/")
    app_url = tenancy.settings.app_url or "http://localhost"

    if context is None:
        return app_url.rstrip("/") + clean_path

    domains = context.entity.domains
    if not isinstance(domains, list):
        domains = context.payload().get("domains")
    if not isinstance(domains, list) or not domains:
        return app_url.rstrip("/") + clean_path

    host = domains[0]
    if not isinstance(host, str) or host == "":
        return app_url.rstrip("/") + clean_path

    scheme = urlsplit(app_url).scheme or "https"
    host = host.split("/", 1)[0]
    return f"{scheme}://{host}{clean_path}"
