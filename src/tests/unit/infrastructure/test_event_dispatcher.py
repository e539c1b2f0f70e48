"""Unit tests for event dispatchers."""

from unittest.mock import MagicMock

from tenancy.domain.events import TenancyEnded, TenantSwitched
from tenancy.infrastructure.event_dispatcher import (
    InMemoryEventDispatcher,
    NullEventDispatcher,
)
from tenancy.ports.events import EventDispatcher


class TestInMemoryEventDispatcher:
    def test_routes_by_exact_event_type(self):
        dispatcher = InMemoryEventDispatcher()
        switched = MagicMock()
        ended = MagicMock()
        dispatcher.subscribe(TenantSwitched, switched)
        dispatcher.subscribe(TenancyEnded, ended)

        event = TenantSwitched(None, None)
        dispatcher.dispatch(event)

        switched.assert_called_once_with(event)
        ended.assert_not_called()
        assert dispatcher.dispatched == [event]

    def test_listeners_run_in_registration_order(self):
        dispatcher = InMemoryEventDispatcher()
        calls = []
        dispatcher.subscribe(TenancyEnded, lambda e: calls.append("first"))
        dispatcher.subscribe(TenancyEnded, lambda e: calls.append("second"))

        dispatcher.dispatch(TenancyEnded(None))

        assert calls == ["first", "second"]
        assert len(dispatcher.listeners_for(TenancyEnded)) == 2

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryEventDispatcher(), EventDispatcher)
        assert isinstance(NullEventDispatcher(), EventDispatcher)
