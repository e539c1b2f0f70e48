"""Unit test fixtures with in-memory collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from tenancy.application.tenancy import Tenancy
from tenancy.domain.value_objects import BySlug, identifier_candidates
from tenancy.infrastructure.database.models import Base
from tenancy.infrastructure.event_dispatcher import InMemoryEventDispatcher
from tenancy.infrastructure.settings import TenancySettings
from tenancy.shared_kernel.domain_normalizer import normalize_domain


@dataclass
class FakeTenant:
    """Tenant satisfying the Tenant, LandlordAwareTenant and DatabaseAwareEntity protocols."""

    id: int | str
    slug: str
    name: str = ""
    domains: list[str] = field(default_factory=list)
    landlord_id: int | str | None = None
    database: dict[str, Any] | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def context_payload(self) -> dict[str, Any]:
        return {**self.data, "name": self.name, "landlord_id": self.landlord_id}

    def database_config(self) -> dict[str, Any] | None:
        return self.database


@dataclass
class FakeLandlord:
    """Landlord satisfying the Landlord protocol."""

    id: int | str
    slug: str
    name: str = ""
    domains: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    def context_payload(self) -> dict[str, Any]:
        return {**self.data, "name": self.name}


@dataclass
class PayloadOnlyTenant:
    """Tenant exposing its landlord only through the context payload."""

    id: int | str
    slug: str
    name: str = ""
    domains: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    def context_payload(self) -> dict[str, Any]:
        return {**self.data, "name": self.name}


class InMemoryEntityRepository:
    """List-backed repository over fake entities."""

    def __init__(self, entities: list[Any] | None = None) -> None:
        self.entities = list(entities or [])

    def find_by_id(self, entity_id: Any) -> Any | None:
        for entity in self.entities:
            if str(entity.id) == str(entity_id):
                return entity
        return None

    def find_by_slug(self, slug: str) -> Any | None:
        for entity in self.entities:
            if entity.slug == slug:
                return entity
        return None

    def find_by_identifier(self, identifier: Any) -> Any | None:
        for candidate in identifier_candidates(identifier):
            if isinstance(candidate, BySlug):
                entity = self.find_by_slug(candidate.value)
            else:
                entity = self.find_by_id(candidate.value)
            if entity is not None:
                return entity
        return None

    def find_by_domain(self, domain: str) -> Any | None:
        normalized = normalize_domain(domain)
        for entity in self.entities:
            if normalized in [normalize_domain(d) for d in entity.domains]:
                return entity
        return None

    def all(self) -> list[Any]:
        return list(self.entities)

    def create(self, attributes: dict[str, Any]) -> Any:
        raise NotImplementedError


class RecordingTask:
    """Task recording every call as (name, action, entity id)."""

    def __init__(self, name: str, log: list[tuple[str, str, Any]]) -> None:
        self.name = name
        self.log = log

    def make_current(self, context: Any) -> None:
        self.log.append((self.name, "make", context.id))

    def forget_current(self, context: Any) -> None:
        self.log.append((self.name, "forget", context.id))

    def made(self) -> list[Any]:
        return self._ids("make")

    def forgot(self) -> list[Any]:
        return self._ids("forget")

    def _ids(self, wanted: str) -> list[Any]:
        return [
            entity_id
            for name, action, entity_id in self.log
            if name == self.name and action == wanted
        ]


@pytest.fixture
def settings() -> TenancySettings:
    """Provide default settings isolated from the environment."""
    return TenancySettings(_env_file=None)


@pytest.fixture
def landlords() -> InMemoryEntityRepository:
    return InMemoryEntityRepository(
        [
            FakeLandlord(id=10, slug="north", name="North", domains=["north.test"]),
            FakeLandlord(id=20, slug="south", name="South", domains=["south.test"]),
        ]
    )


@pytest.fixture
def tenants() -> InMemoryEntityRepository:
    return InMemoryEntityRepository(
        [
            FakeTenant(id=1, slug="acme", name="Acme", domains=["acme.test"], landlord_id=10),
            FakeTenant(id=2, slug="globex", name="Globex", domains=["globex.test"], landlord_id=20),
            FakeTenant(id=3, slug="initech", name="Initech", domains=[]),
        ]
    )


@pytest.fixture
def events() -> InMemoryEventDispatcher:
    return InMemoryEventDispatcher()


@pytest.fixture
def task_log() -> list[tuple[str, str, Any]]:
    return []


@pytest.fixture
def tenant_task(task_log) -> RecordingTask:
    return RecordingTask("tenant", task_log)


@pytest.fixture
def landlord_task(task_log) -> RecordingTask:
    return RecordingTask("landlord", task_log)


@pytest.fixture
def tenancy(tenants, landlords, settings, events, tenant_task, landlord_task) -> Tenancy:
    """Provide an engine wired to in-memory repositories and recording tasks."""
    return Tenancy(
        tenants=tenants,
        landlords=landlords,
        settings=settings,
        tenant_tasks=[tenant_task],
        landlord_tasks=[landlord_task],
        events=events,
    )


@pytest.fixture
def fake_tenant():
    """Expose the FakeTenant factory to test modules."""
    return FakeTenant


@pytest.fixture
def fake_landlord():
    """Expose the FakeLandlord factory to test modules."""
    return FakeLandlord


@pytest.fixture
def payload_only_tenant():
    return PayloadOnlyTenant


@pytest.fixture
def entity_repository():
    """Expose the in-memory repository class to test modules."""
    return InMemoryEntityRepository


@pytest.fixture
def db_session():
    """Provide a session bound to a fresh in-memory SQLite database."""
    import tenancy.infrastructure.models  # noqa: F401

    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def recording_task():
    """Expose the RecordingTask class to test modules."""
    return RecordingTask
