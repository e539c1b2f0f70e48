"""Tenant lifecycle events.

Dispatched by the tenancy engine to any interested collaborator (logging,
metrics, cache warmers) whenever the active tenant is resolved, switched
or ended.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tenancy.domain.value_objects import TenantContext


@dataclass(frozen=True)
class TenantResolving:
    """Raised before the tenant resolver chain runs for a request.

    Attributes:
        request: The inbound request being resolved
    """

    request: Any


@dataclass(frozen=True)
class TenantResolved:
    """Raised after a request was resolved to a tenant and pushed.

    Attributes:
        context: The newly active tenant context
        previous: The tenant context that was active before, if any
    """

    context: TenantContext
    previous: TenantContext | None


@dataclass(frozen=True)
class TenantSwitched:
    """Raised after an effective tenant transition ran its tasks.

    Attributes:
        previous: The context that was deactivated, or None
        current: The context that was activated, or None
    """

    previous: TenantContext | None
    current: TenantContext | None


@dataclass(frozen=True)
class TenancyEnded:
    """Raised after the whole tenant stack was forgotten.

    Attributes:
        previous: The tenant context that was on top before forgetting
    """

    previous: TenantContext | None
