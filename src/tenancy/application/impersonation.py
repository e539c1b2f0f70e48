"""Single-use impersonation tokens.

An operator (the actor) asks for a token bound to one tenant; the token is
then handed to a browser, typically as a query parameter, and redeemed
exactly once to enter that tenant's context.
"""

from __future__ import annotations

import secrets
import time
from collections.abc import Mapping
from typing import Any

from tenancy.application.observability import (
    DefaultImpersonationProbe,
    ImpersonationProbe,
)
from tenancy.application.tenancy import Tenancy, TenantLike
from tenancy.infrastructure.cache import CacheManager, CacheService
from tenancy.infrastructure.settings import ImpersonationSettings


class ImpersonationManager:
    """Issue, consume and apply impersonation tokens.

    Records live in the unprefixed cache store named by
    ``impersonation.cache_store`` so a token issued inside one tenant's
    context can be redeemed from any other. Consumption pops the record,
    which is atomic on Redis (``GETDEL``).
    """

    def __init__(
        self,
        tenancy: Tenancy,
        cache: CacheManager,
        settings: ImpersonationSettings | None = None,
        probe: ImpersonationProbe | None = None,
    ) -> None:
        self._tenancy = tenancy
        self._cache = cache
        self._settings = settings or tenancy.settings.impersonation
        self._probe = probe or DefaultImpersonationProbe()

    def issue_token(
        self,
        tenant: TenantLike,
        actor_id: int | str,
        actor_kind: str | None = None,
        ttl_seconds: int | None = None,
    ) -> str | None:
        """Issue a token that enters ``tenant`` when applied.

        Args:
            tenant: Tenant entity, context or identifier
            actor_id: Identifier of the operator doing the impersonation
            actor_kind: Optional kind of actor (e.g. the auth guard name)
            ttl_seconds: Token lifetime; defaults to ``impersonation.ttl_seconds``

        Returns:
            A 64 character hex token, or None when ``tenant`` does not resolve
        """
        context = self._tenancy.tenant(tenant)
        if context is None:
            self._probe.token_target_not_found(actor_id)
            return None

        token = secrets.token_hex(32)
        ttl = ttl_seconds if ttl_seconds and ttl_seconds > 0 else self._settings.ttl_seconds

        self._store().put(
            self._key(token),
            {
                "tenant": context.payload(),
                "actor_id": actor_id,
                "actor_kind": actor_kind,
                "issued_at": int(time.time()),
            },
            ttl,
        )

        self._probe.token_issued(context.id, actor_id, actor_kind, ttl)
        return token

    def consume_token(self, token: str) -> dict[str, Any] | None:
        """Read and delete the record for ``token``; a second call returns None."""
        payload = self._store().pull(self._key(token))
        if not isinstance(payload, dict):
            self._probe.token_rejected()
            return None

        tenant = payload.get("tenant")
        tenant_id = tenant.get("id") if isinstance(tenant, Mapping) else None
        self._probe.token_consumed(tenant_id, payload.get("actor_id"))
        return payload

    def apply_token(self, token: str) -> dict[str, Any] | None:
        """Consume ``token`` and push the tenant it was issued for.

        Returns:
            The full token record, or None when the token is unknown or
            carries no tenant payload
        """
        payload = self.consume_token(token)
        if payload is None:
            return None

        tenant_payload = payload.get("tenant")
        if not isinstance(tenant_payload, Mapping):
            return None

        self._tenancy.from_tenant_payload(tenant_payload)
        return payload

    def query_parameter(self) -> str:
        return self._settings.query_parameter

    def _key(self, token: str) -> str:
        return f"{self._settings.cache_prefix}{token}"

    def _store(self) -> CacheService:
        return self._cache.global_store(self._settings.cache_store)
