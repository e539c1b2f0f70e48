"""Event sink protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.events import DomainEvent


@runtime_checkable
class EventDispatcher(Protocol):
    """Receives tenancy lifecycle notifications."""

    def dispatch(self, event: DomainEvent) -> None: ...
