"""SQLAlchemy repository shared by tenants and landlords.

Resolves entities by id, slug, opaque identifier and domain. Domain
resolution runs three tiers, optionally behind a read-through cache:

1. the flat lookup table (``tenant_domains`` / ``landlord_domains``);
2. a "domain list contains" query against the entity's ``domains`` column,
   first with the normalized domain, then with the original spelling;
3. a full scan normalizing every stored domain.

A degraded or missing lookup table never breaks resolution: its errors
are logged through the probe and the next tier is tried.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from sqlalchemy import (
    DateTime,
    String,
    cast,
    column,
    delete,
    insert,
    inspect,
    select,
    table,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import type_coerce

from tenancy.domain.entities import EntityId
from tenancy.domain.value_objects import ById, BySlug, Identifier, identifier_candidates
from tenancy.infrastructure.cache import CacheManager
from tenancy.infrastructure.observability import (
    DefaultDomainLookupProbe,
    DomainLookupProbe,
)
from tenancy.infrastructure.settings import DomainLookupSettings
from tenancy.shared_kernel.domain_normalizer import normalize_domain

ModelT = TypeVar("ModelT")


class SqlAlchemyEntityRepository(Generic[ModelT]):
    """Entity repository over a synchronous SQLAlchemy ``Session``.

    Subclasses bind the ORM model, lookup table name and foreign key
    column for one entity kind.
    """

    kind: str = "entity"

    def __init__(
        self,
        session: Session,
        model: type[ModelT],
        lookup_table: str,
        foreign_key: str,
        settings: DomainLookupSettings,
        cache: CacheManager | None = None,
        probe: DomainLookupProbe | None = None,
    ) -> None:
        """Initialize repository with a session and lookup configuration.

        Args:
            session: Session owned by the current unit of work
            model: ORM class satisfying the entity protocol
            lookup_table: Name of the flat domain lookup table
            foreign_key: Lookup table column referencing the entity id
            settings: Domain lookup settings for this entity kind
            cache: Cache manager, required when lookup caching is enabled
            probe: Optional domain probe for observability
        """
        self._session = session
        self._model = model
        self._lookup_table_name = lookup_table
        self._foreign_key = foreign_key
        self._settings = settings
        self._cache = cache
        self._probe = probe or DefaultDomainLookupProbe()
        self._lookup_table = table(
            lookup_table,
            column(foreign_key),
            column("domain", String),
            column("created_at", DateTime(timezone=True)),
            column("updated_at", DateTime(timezone=True)),
        )

    @property
    def model(self) -> type[ModelT]:
        return self._model

    # Lookups

    def find_by_id(self, entity_id: EntityId) -> ModelT | None:
        key = self._coerce_id(entity_id)
        if key is None:
            return None
        return self._session.get(self._model, key)

    def find_by_slug(self, slug: str) -> ModelT | None:
        if not isinstance(slug, str) or slug == "":
            return None
        stmt = select(self._model).where(self._model.slug == slug).limit(1)
        return self._session.scalars(stmt).first()

    def find_by_identifier(self, identifier: EntityId | Identifier) -> ModelT | None:
        for candidate in identifier_candidates(identifier):
            if isinstance(candidate, BySlug):
                entity = self.find_by_slug(candidate.value)
            else:
                entity = self.find_by_id(candidate.value)
            if entity is not None:
                return entity
        return None

    def find_by_domain(self, domain: str) -> ModelT | None:
        normalized = normalize_domain(domain)
        if normalized is None:
            return None

        entity_id = self._resolve_id_by_domain(normalized, domain.strip())
        if entity_id is None or entity_id == "":
            self._probe.domain_not_found(self.kind, normalized)
            return None
        return self.find_by_id(entity_id)

    def all(self) -> Iterator[ModelT]:
        stmt = select(self._model).order_by(self._model.id)
        yield from self._session.scalars(stmt)

    # Writes

    def create(self, attributes: dict[str, Any]) -> ModelT:
        """Persist a new entity and index its domains."""
        entity = self._model(**attributes)
        self._session.add(entity)
        self._session.flush()
        self.sync_domain_lookup(entity)
        return entity

    def update(self, entity: ModelT, attributes: dict[str, Any]) -> ModelT:
        """Apply ``attributes`` and rebuild the domain index when domains changed."""
        previous_domains = list(entity.domains or [])
        for name, value in attributes.items():
            setattr(entity, name, value)
        self._session.flush()
        if "domains" in attributes:
            self._forget_cached_domains([*previous_domains, *(entity.domains or [])])
            self.sync_domain_lookup(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        """Delete an entity together with its lookup rows."""
        self._forget_cached_domains(list(entity.domains or []))
        self.purge_domain_lookup(entity.id)
        self._session.delete(entity)
        self._session.flush()

    def sync_domain_lookup(self, entity: ModelT) -> None:
        """Replace every lookup row for ``entity`` with its current domains.

        Domains that fail normalization are skipped. A no-op when the table
        is disabled or absent.
        """
        if not self._lookup_table_available():
            return

        now = datetime.now(timezone.utc)
        rows: list[dict[str, Any]] = []
        seen: set[str] = set()
        for domain in entity.domains or []:
            normalized = normalize_domain(domain)
            if normalized is None or normalized in seen:
                continue
            seen.add(normalized)
            rows.append(
                {
                    self._foreign_key: entity.id,
                    "domain": normalized,
                    "created_at": now,
                    "updated_at": now,
                }
            )

        try:
            with self._guarded():
                self._session.execute(
                    delete(self._lookup_table).where(
                        self._lookup_table.c[self._foreign_key] == entity.id
                    )
                )
                if rows:
                    self._session.execute(insert(self._lookup_table), rows)
        except SQLAlchemyError as e:
            self._probe.domain_lookup_write_failed(self.kind, entity.id, e)
            return

        self._probe.domain_lookup_synced(self.kind, entity.id, len(rows))

    def purge_domain_lookup(self, entity_id: EntityId) -> None:
        """Remove every lookup row for ``entity_id``."""
        if not self._lookup_table_available():
            return

        try:
            with self._guarded():
                self._session.execute(
                    delete(self._lookup_table).where(
                        self._lookup_table.c[self._foreign_key] == entity_id
                    )
                )
        except SQLAlchemyError as e:
            self._probe.domain_lookup_write_failed(self.kind, entity_id, e)
            return

        self._probe.domain_lookup_purged(self.kind, entity_id)

    # Domain resolution tiers

    def _resolve_id_by_domain(self, normalized: str, original: str) -> EntityId | None:
        cache_settings = self._settings.cache
        if not cache_settings.enabled or self._cache is None:
            return self._resolve_id_uncached(normalized, original)

        store = self._cache.global_store(cache_settings.store)
        return store.remember(
            f"{cache_settings.prefix}{normalized}",
            cache_settings.ttl_seconds,
            lambda: self._resolve_id_uncached(normalized, original),
        )

    def _resolve_id_uncached(self, normalized: str, original: str) -> EntityId | None:
        tiers: list[tuple[str, Callable[[], EntityId | None]]] = [
            ("table", lambda: self._find_id_in_lookup_table(normalized)),
            ("column", lambda: self._find_id_in_domain_column(normalized)),
        ]
        if original != normalized:
            tiers.append(("column", lambda: self._find_id_in_domain_column(original)))
        tiers.append(("scan", lambda: self._find_id_by_scan(normalized)))

        for tier, lookup in tiers:
            entity_id = lookup()
            if entity_id is not None and entity_id != "":
                self._probe.domain_resolved(self.kind, normalized, entity_id, tier)
                return entity_id
        return None

    def _find_id_in_lookup_table(self, domain: str) -> EntityId | None:
        if not self._lookup_table_available():
            return None

        stmt = (
            select(self._lookup_table.c[self._foreign_key])
            .where(self._lookup_table.c.domain == domain)
            .limit(1)
        )
        try:
            with self._guarded():
                return self._session.execute(stmt).scalar()
        except SQLAlchemyError as e:
            self._probe.lookup_table_failed(self.kind, self._lookup_table_name, e)
            return None

    def _find_id_in_domain_column(self, domain: str) -> EntityId | None:
        domains_column = self._model.domains
        if self._dialect_name() == "postgresql":
            stmt = select(self._model.id).where(
                type_coerce(domains_column, JSONB).contains([domain])
            )
            return self._session.execute(stmt.limit(1)).scalar()

        # Other dialects: narrow with a text match on the serialized list,
        # then confirm exact membership
        stmt = select(self._model).where(
            cast(domains_column, String).contains(f'"{domain}"', autoescape=True)
        )
        for entity in self._session.scalars(stmt):
            if domain in (entity.domains or []):
                return entity.id
        return None

    def _find_id_by_scan(self, domain: str) -> EntityId | None:
        for entity in self.all():
            for candidate in entity.domains or []:
                if normalize_domain(candidate) == domain:
                    return entity.id
        return None

    # Helpers

    def _lookup_table_available(self) -> bool:
        if not self._settings.use_table:
            return False
        try:
            return inspect(self._session.connection()).has_table(self._lookup_table_name)
        except SQLAlchemyError as e:
            self._probe.lookup_table_failed(self.kind, self._lookup_table_name, e)
            return False

    @contextmanager
    def _guarded(self) -> Iterator[None]:
        """Isolate a lookup-table statement so its failure leaves the session usable.

        pysqlite does not emit SAVEPOINT reliably, so SQLite runs unguarded.
        """
        if self._dialect_name() == "sqlite":
            yield
            return
        with self._session.begin_nested():
            yield

    def _dialect_name(self) -> str:
        return self._session.get_bind().dialect.name

    def _coerce_id(self, entity_id: Any) -> Any | None:
        if isinstance(entity_id, ById):
            entity_id = entity_id.value
        if isinstance(entity_id, bool) or entity_id is None:
            return None
        if self._id_python_type() is int and isinstance(entity_id, str):
            value = entity_id.strip()
            if not value.lstrip("-").isdigit():
                return None
            return int(value)
        return entity_id

    def _id_python_type(self) -> type | None:
        try:
            return self._model.__table__.c.id.type.python_type
        except NotImplementedError:
            return None

    def _forget_cached_domains(self, domains: list[str]) -> None:
        cache_settings = self._settings.cache
        if not cache_settings.enabled or self._cache is None:
            return
        store = self._cache.global_store(cache_settings.store)
        for domain in domains:
            normalized = normalize_domain(domain)
            if normalized is not None:
                store.forget(f"{cache_settings.prefix}{normalized}")
