"""Context stack engine.

``Tenancy`` keeps two LIFO stacks of active contexts, one for tenants and
one for landlords. A ``None`` entry is an explicit system scope. Every
effective change at the top of a stack runs the registered tasks
(``forget_current`` on the outgoing context, then ``make_current`` on the
incoming one, both in list order) and dispatches a ``*Switched`` event.

One instance serves one unit of work (a request, a queue job, a command);
there is no module-level singleton. Build one with
``tenancy.dependencies.build_tenancy``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, TypeVar

from tenancy.application.observability import DefaultTenancyProbe, TenancyProbe
from tenancy.application.resolvers import ChainResolver
from tenancy.domain.entities import (
    DatabaseAwareEntity,
    Entity,
    EntityId,
    Landlord,
    LandlordAwareTenant,
    Tenant,
)
from tenancy.domain.events import (
    LandlordEnded,
    LandlordResolved,
    LandlordResolving,
    LandlordSwitched,
    TenancyEnded,
    TenantResolved,
    TenantResolving,
    TenantSwitched,
)
from tenancy.domain.value_objects import (
    ById,
    BySlug,
    EntityContext,
    IsolationMode,
    LandlordContext,
    TenantContext,
)
from tenancy.infrastructure.event_dispatcher import NullEventDispatcher
from tenancy.infrastructure.settings import TenancySettings
from tenancy.ports.events import EventDispatcher
from tenancy.ports.exceptions import (
    InconsistentTenantLandlordContext,
    UnresolvedLandlordContext,
    UnresolvedTenantContext,
)
from tenancy.ports.repositories import ILandlordRepository, ITenantRepository
from tenancy.ports.resolvers import EntityResolver, TenancyRequest
from tenancy.ports.tasks import ContextTask

T = TypeVar("T")

TenantLike = Tenant | TenantContext | EntityId | ById | BySlug
LandlordLike = Landlord | LandlordContext | EntityId | ById | BySlug


class Tenancy:
    """Tenant and landlord context stacks with task lifecycle management."""

    def __init__(
        self,
        tenants: ITenantRepository,
        landlords: ILandlordRepository | None = None,
        settings: TenancySettings | None = None,
        tenant_resolver: EntityResolver | None = None,
        landlord_resolver: EntityResolver | None = None,
        tenant_tasks: Sequence[ContextTask] = (),
        landlord_tasks: Sequence[ContextTask] = (),
        events: EventDispatcher | None = None,
        probe: TenancyProbe | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            tenants: Tenant repository
            landlords: Landlord repository; landlord lookups miss without one
            settings: Tenancy settings (defaults are used when omitted)
            tenant_resolver: Resolver used by ``resolve_tenant``
            landlord_resolver: Resolver used by ``resolve_landlord``
            tenant_tasks: Tasks run on every effective tenant switch, in order
            landlord_tasks: Tasks run on every effective landlord switch, in order
            events: Event sink for lifecycle events
            probe: Optional domain probe for observability
        """
        self._tenants = tenants
        self._landlords = landlords
        self._settings = settings or TenancySettings()
        self._tenant_resolver = tenant_resolver or ChainResolver([])
        self._landlord_resolver = landlord_resolver or ChainResolver([])
        self._tenant_tasks = list(tenant_tasks)
        self._landlord_tasks = list(landlord_tasks)
        self._events = events or NullEventDispatcher()
        self._probe = probe or DefaultTenancyProbe()
        self._tenant_stack: list[TenantContext | None] = []
        self._landlord_stack: list[LandlordContext | None] = []

    @property
    def settings(self) -> TenancySettings:
        return self._settings

    @property
    def tenant_tasks(self) -> list[ContextTask]:
        return list(self._tenant_tasks)

    @property
    def landlord_tasks(self) -> list[ContextTask]:
        return list(self._landlord_tasks)

    def tenant_resolver(self) -> EntityResolver:
        return self._tenant_resolver

    def landlord_resolver(self) -> EntityResolver:
        return self._landlord_resolver

    # Current state

    def current_tenant(self) -> TenantContext | None:
        return self._tenant_stack[-1] if self._tenant_stack else None

    def current_landlord(self) -> LandlordContext | None:
        return self._landlord_stack[-1] if self._landlord_stack else None

    def tenant_id(self) -> EntityId | None:
        context = self.current_tenant()
        return context.id if context is not None else None

    def landlord_id(self) -> EntityId | None:
        context = self.current_landlord()
        return context.id if context is not None else None

    @property
    def tenant_depth(self) -> int:
        """Number of entries on the tenant stack, system scopes included."""
        return len(self._tenant_stack)

    @property
    def landlord_depth(self) -> int:
        """Number of entries on the landlord stack, system scopes included."""
        return len(self._landlord_stack)

    # Lookups

    def tenant(self, value: TenantLike | None) -> TenantContext | None:
        """Normalize an entity, context or identifier into a tenant context.

        Identifiers are looked up through the repository; misses are None.
        """
        if value is None:
            return None
        if isinstance(value, TenantContext):
            return value
        if _is_identifier(value):
            tenant = self._tenants.find_by_identifier(value)
            return TenantContext(tenant) if tenant is not None else None
        if isinstance(value, Entity) and not isinstance(value, EntityContext):
            return TenantContext(value)
        return None

    def landlord(self, value: LandlordLike | None) -> LandlordContext | None:
        """Normalize an entity, context or identifier into a landlord context."""
        if value is None:
            return None
        if isinstance(value, LandlordContext):
            return value
        if _is_identifier(value):
            if self._landlords is None:
                return None
            landlord = self._landlords.find_by_identifier(value)
            return LandlordContext(landlord) if landlord is not None else None
        if isinstance(value, Entity) and not isinstance(value, EntityContext):
            return LandlordContext(value)
        return None

    def tenant_by_slug(self, slug: str) -> TenantContext | None:
        tenant = self._tenants.find_by_slug(slug)
        return TenantContext(tenant) if tenant is not None else None

    def landlord_by_slug(self, slug: str) -> LandlordContext | None:
        if self._landlords is None:
            return None
        landlord = self._landlords.find_by_slug(slug)
        return LandlordContext(landlord) if landlord is not None else None

    def all_tenants(self) -> Iterable[Tenant]:
        return self._tenants.all()

    def all_landlords(self) -> Iterable[Landlord]:
        if self._landlords is None:
            return []
        return self._landlords.all()

    # Scoped execution

    def run_as_tenant(self, tenant: TenantLike, callback: Callable[[], T]) -> T:
        """Call ``callback`` with ``tenant`` (and its landlord) active.

        Raises:
            UnresolvedTenantContext: ``tenant`` names no tenant and
                ``context.require_resolved`` is enabled
            InconsistentTenantLandlordContext: the tenant's landlord clashes
                with coherence rules
        """
        with self.tenant_scope(tenant):
            return callback()

    def run_as_landlord(self, landlord: LandlordLike, callback: Callable[[], T]) -> T:
        """Call ``callback`` with ``landlord`` active.

        Raises:
            UnresolvedLandlordContext: ``landlord`` names no landlord and
                ``context.require_resolved`` is enabled
            InconsistentTenantLandlordContext: ``landlord`` does not own the
                active tenant
        """
        with self.landlord_scope(landlord):
            return callback()

    def run_as_system(self, callback: Callable[[], T]) -> T:
        """Call ``callback`` with neither a tenant nor a landlord active."""
        with self.system_scope():
            return callback()

    @contextmanager
    def tenant_scope(self, tenant: TenantLike) -> Iterator[TenantContext | None]:
        """Context-manager form of ``run_as_tenant``.

        Yields the active tenant context, or None when the value did not
        resolve and the block runs in system scope instead.
        """
        context = self.tenant(tenant)
        if context is None:
            self._probe.context_unresolved("tenant", tenant)
            if self._settings.context.require_resolved:
                raise UnresolvedTenantContext.for_identifier(tenant)
            with self.system_scope():
                yield None
            return

        self.push_tenant(context)
        landlord_pushed = False
        try:
            landlord_pushed = self._push_landlord_for_tenant(context)
            yield context
        finally:
            self.pop_tenant()
            if landlord_pushed:
                self.pop_landlord()

    @contextmanager
    def landlord_scope(self, landlord: LandlordLike) -> Iterator[LandlordContext | None]:
        """Context-manager form of ``run_as_landlord``."""
        context = self.landlord(landlord)
        if context is None:
            self._probe.context_unresolved("landlord", landlord)
            if self._settings.context.require_resolved:
                raise UnresolvedLandlordContext.for_identifier(landlord)
            with self.system_scope():
                yield None
            return

        self.push_landlord(context)
        try:
            yield context
        finally:
            self.pop_landlord()

    @contextmanager
    def system_scope(self) -> Iterator[None]:
        """Context-manager form of ``run_as_system``."""
        self.push_landlord(None)
        self.push_tenant(None)
        try:
            yield None
        finally:
            self.pop_tenant()
            self.pop_landlord()

    # Stack primitives

    def push_tenant(self, context: TenantContext | None) -> None:
        """Push ``context`` (None for system scope) and run the switch."""
        previous = self.current_tenant()
        self._tenant_stack.append(context)
        try:
            self._switch_tenant(previous, context)
        except Exception:
            self._tenant_stack.pop()
            raise

    def pop_tenant(self) -> TenantContext | None:
        """Pop the top tenant entry and switch back to the one below it."""
        if not self._tenant_stack:
            return None
        previous = self._tenant_stack.pop()
        self._switch_tenant(previous, self.current_tenant())
        return previous

    def push_landlord(self, context: LandlordContext | None) -> None:
        """Push ``context`` (None for system scope) and run the switch.

        The entry is removed again when the switch is rejected, so a failed
        coherence check leaves the stack as it was.
        """
        previous = self.current_landlord()
        self._landlord_stack.append(context)
        try:
            self._switch_landlord(previous, context)
        except Exception:
            self._landlord_stack.pop()
            raise

    def pop_landlord(self) -> LandlordContext | None:
        """Pop the top landlord entry and switch back to the one below it."""
        if not self._landlord_stack:
            return None
        previous = self._landlord_stack.pop()
        self._switch_landlord(previous, self.current_landlord())
        return previous

    # Forgetting

    def forget_current_tenant(self) -> None:
        """Collapse the tenant stack and tear down the active tenant.

        Also forgets the landlord stack while ``landlord.sync_with_tenant``
        is enabled.
        """
        previous = self.current_tenant()
        self._tenant_stack = []
        self._switch_tenant(previous, None)

        if self._settings.landlord.sync_with_tenant:
            self.forget_current_landlord()

        self._probe.context_forgotten("tenant", _context_id(previous))
        self._events.dispatch(TenancyEnded(previous))

    def forget_current_landlord(self) -> None:
        """Collapse the landlord stack and tear down the active landlord."""
        if not self._landlord_stack:
            return

        previous = self.current_landlord()
        self._landlord_stack = []
        self._switch_landlord(previous, None)

        self._probe.context_forgotten("landlord", _context_id(previous))
        self._events.dispatch(LandlordEnded(previous))

    # Request resolution

    def resolve_tenant(self, request: TenancyRequest) -> TenantContext | None:
        """Resolve ``request`` to a tenant and make it (and its landlord) active.

        Returns:
            The pushed tenant context, or None when no resolver matched
        """
        self._events.dispatch(TenantResolving(request))

        tenant = self._tenant_resolver.resolve(request)
        if tenant is None:
            self._probe.context_not_resolved("tenant")
            return None

        context = TenantContext(tenant)
        previous = self.current_tenant()
        self.push_tenant(context)
        self._push_landlord_for_tenant(context)

        self._probe.context_resolved("tenant", context.id)
        self._events.dispatch(TenantResolved(context, previous))
        return context

    def resolve_landlord(self, request: TenancyRequest) -> LandlordContext | None:
        """Resolve ``request`` to a landlord and make it active."""
        self._events.dispatch(LandlordResolving(request))

        landlord = self._landlord_resolver.resolve(request)
        if landlord is None:
            self._probe.context_not_resolved("landlord")
            return None

        context = LandlordContext(landlord)
        previous = self.current_landlord()
        self.push_landlord(context)

        self._probe.context_resolved("landlord", context.id)
        self._events.dispatch(LandlordResolved(context, previous))
        return context

    # Connections, isolation and queues

    def tenant_connection(self) -> str | None:
        """Connection name for the active tenant, or the configured fallback."""
        context = self.current_tenant()
        return _connection_for(context, self._settings.database.connection)

    def landlord_connection(self) -> str | None:
        """Connection name for the active landlord, or the configured fallback."""
        context = self.current_landlord()
        return _connection_for(context, self._settings.landlord.database.connection)

    def tenant_isolation(self) -> IsolationMode:
        return self._settings.isolation

    def landlord_isolation(self) -> IsolationMode:
        return self._settings.landlord.isolation

    def tenant_scoped_queue(self, queue: str, tenant: TenantLike | None = None) -> str:
        """Return ``{prefix}{delimiter}{id}{delimiter}{queue}`` for a tenant.

        Uses ``tenant`` when given and resolvable, else the active tenant;
        returns ``queue`` unchanged when neither applies.
        """
        context = self.tenant(tenant) or self.current_tenant()
        if context is None:
            return queue
        settings = self._settings.queue
        return f"{settings.prefix}{settings.delimiter}{context.id}{settings.delimiter}{queue}"

    def landlord_scoped_queue(
        self, queue: str, landlord: LandlordLike | None = None
    ) -> str:
        """Landlord counterpart of ``tenant_scoped_queue``."""
        context = self.landlord(landlord) or self.current_landlord()
        if context is None:
            return queue
        settings = self._settings.landlord.queue
        return f"{settings.prefix}{settings.delimiter}{context.id}{settings.delimiter}{queue}"

    # Payloads

    def tenant_payload(self) -> dict[str, Any] | None:
        context = self.current_tenant()
        return context.payload() if context is not None else None

    def landlord_payload(self) -> dict[str, Any] | None:
        context = self.current_landlord()
        return context.payload() if context is not None else None

    def tenancy_payload(self) -> dict[str, Any] | None:
        """Serialize the active contexts for a queued job or a subprocess.

        Shapes:
            tenant and landlord: ``{"tenant": {...}, "landlord": {...}}``
            tenant only: the flat tenant payload
            landlord only: ``{"landlord": {...}}``
            neither: None
        """
        tenant = self.tenant_payload()
        landlord = self.landlord_payload()

        if tenant is None and landlord is None:
            return None
        if landlord is None:
            return tenant
        if tenant is None:
            return {"landlord": landlord}
        return {"tenant": tenant, "landlord": landlord}

    def from_tenant_payload(self, payload: Mapping[str, Any]) -> None:
        """Push the tenant named by a flat payload, plus its landlord."""
        context = self._tenant_from_payload(payload)
        if context is None:
            return

        self.push_tenant(context)
        self._push_landlord_for_tenant(context)

    def from_landlord_payload(self, payload: Mapping[str, Any]) -> None:
        """Push the landlord named by a flat payload."""
        if self._landlords is None:
            return

        landlord = None
        identifier = payload.get("id")
        if _is_raw_identifier(identifier):
            landlord = self._landlords.find_by_identifier(identifier)

        slug = payload.get("slug")
        if landlord is None and isinstance(slug, str):
            landlord = self._landlords.find_by_slug(slug)

        if landlord is None:
            return

        self.push_landlord(LandlordContext(landlord))

    def from_tenancy_payload(self, payload: Mapping[str, Any]) -> None:
        """Restore contexts from a payload produced by ``tenancy_payload``.

        A payload is read as nested when it has a ``tenant`` or ``landlord``
        key and neither ``id`` nor ``slug``. A flat payload with a sibling
        ``landlord`` key therefore stays flat and the sibling is ignored.

        An explicit landlord sub-payload is restored even when the tenant
        does not resolve, unless an explicit tenant sub-payload was given.
        """
        tenant_payload: Mapping[str, Any] = payload
        landlord_payload: Mapping[str, Any] | None = None
        has_explicit_tenant = False

        if _is_nested_envelope(payload):
            if isinstance(payload.get("tenant"), Mapping):
                tenant_payload = payload["tenant"]
                has_explicit_tenant = True
            if isinstance(payload.get("landlord"), Mapping):
                landlord_payload = payload["landlord"]

        context = self._tenant_from_payload(tenant_payload)
        if context is None:
            if has_explicit_tenant:
                return
            if landlord_payload is not None:
                self.from_landlord_payload(landlord_payload)
            return

        self.push_tenant(context)

        if landlord_payload is not None:
            self.from_landlord_payload(landlord_payload)
            return

        self._push_landlord_for_tenant(context)

    # Internals

    def _switch_tenant(
        self, previous: TenantContext | None, current: TenantContext | None
    ) -> None:
        if _same_entity(previous, current):
            return

        if previous is not None:
            for task in self._tenant_tasks:
                task.forget_current(previous)

        if current is not None:
            for task in self._tenant_tasks:
                task.make_current(current)

        self._probe.context_switched("tenant", _context_id(previous), _context_id(current))
        self._events.dispatch(TenantSwitched(previous, current))

    def _switch_landlord(
        self, previous: LandlordContext | None, current: LandlordContext | None
    ) -> None:
        if _same_entity(previous, current):
            return

        if current is not None:
            self._assert_landlord_matches_tenant(current)

        if previous is not None:
            for task in self._landlord_tasks:
                task.forget_current(previous)

        if current is not None:
            for task in self._landlord_tasks:
                task.make_current(current)

        self._probe.context_switched(
            "landlord", _context_id(previous), _context_id(current)
        )
        self._events.dispatch(LandlordSwitched(previous, current))

    def _push_landlord_for_tenant(self, context: TenantContext) -> bool:
        """Push the landlord owning ``context`` when sync is enabled.

        An explicit None is pushed when the owner is unknown or does not
        resolve, so the caller can always pop symmetrically.

        Returns:
            True when an entry (possibly None) was pushed
        """
        if not self._settings.landlord.sync_with_tenant:
            return False

        identifier = self._landlord_identifier_for(context.tenant)
        landlord = self.landlord(identifier) if identifier is not None else None
        self.push_landlord(landlord)
        return True

    def _landlord_identifier_for(self, tenant: Tenant) -> EntityId | None:
        if isinstance(tenant, LandlordAwareTenant):
            identifier = tenant.landlord_id
        else:
            identifier = tenant.context_payload().get(self._settings.landlord.payload_key)
        return identifier if _is_raw_identifier(identifier) else None

    def _assert_landlord_matches_tenant(self, landlord: LandlordContext) -> None:
        if not self._settings.context.enforce_coherence:
            return

        tenant = self.current_tenant()
        if tenant is None:
            return

        expected = self._landlord_identifier_for(tenant.tenant)
        if expected is None or str(expected) == str(landlord.id):
            return

        self._probe.coherence_violated(tenant.id, expected, landlord.id)
        raise InconsistentTenantLandlordContext.for_identifiers(
            tenant.id, expected, landlord.id
        )

    def _tenant_from_payload(self, payload: Mapping[str, Any]) -> TenantContext | None:
        tenant = None
        identifier = payload.get("id")
        if _is_raw_identifier(identifier):
            tenant = self._tenants.find_by_identifier(identifier)

        slug = payload.get("slug")
        if tenant is None and isinstance(slug, str):
            tenant = self._tenants.find_by_slug(slug)

        return TenantContext(tenant) if tenant is not None else None


def _is_raw_identifier(value: Any) -> bool:
    return isinstance(value, (int, str)) and not isinstance(value, bool)


def _is_identifier(value: Any) -> bool:
    return _is_raw_identifier(value) or isinstance(value, (ById, BySlug))


def _is_nested_envelope(payload: Mapping[str, Any]) -> bool:
    if "tenant" not in payload and "landlord" not in payload:
        return False
    return "id" not in payload and "slug" not in payload


def _same_entity(previous: EntityContext | None, current: EntityContext | None) -> bool:
    if previous is None:
        return current is None
    return previous.same_entity(current)


def _context_id(context: EntityContext | None) -> EntityId | None:
    return context.id if context is not None else None


def _connection_for(context: EntityContext | None, fallback: str | None) -> str | None:
    if context is not None and isinstance(context.entity, DatabaseAwareEntity):
        database = context.entity.database_config()
        if isinstance(database, dict):
            connection = database.get("connection")
            if isinstance(connection, str):
                return connection
    return fallback
