"""Unit tests for the named connection manager."""

import pytest

from tenancy.infrastructure.database.connections import ConnectionManager


class TestConnectionManager:
    def test_default_must_be_configured(self):
        with pytest.raises(ValueError, match="central"):
            ConnectionManager({"other": "sqlite://"}, default="central")

    def test_engines_are_cached_per_connection(self):
        manager = ConnectionManager({"central": "sqlite://", "acme": "sqlite://"}, "central")

        assert manager.engine() is manager.engine("central")
        assert manager.engine("acme") is not manager.engine("central")

    def test_engine_follows_default(self):
        manager = ConnectionManager({"central": "sqlite://", "acme": "sqlite://"}, "central")
        acme = manager.engine("acme")

        manager.default = "acme"

        assert manager.engine() is acme

    def test_purge_recreates_engine(self):
        manager = ConnectionManager({"central": "sqlite://"}, "central")
        engine = manager.engine()

        manager.purge("central")
        manager.purge("never-created")

        assert manager.engine() is not engine

    def test_unknown_connection(self):
        manager = ConnectionManager({"central": "sqlite://"}, "central")

        with pytest.raises(KeyError):
            manager.engine("acme")

    def test_tenant_override_wins_over_landlord(self):
        manager = ConnectionManager(
            {"central": "sqlite://", "acme": "sqlite://", "north": "sqlite://"}, "central"
        )

        manager.set_override("landlord", "north")
        assert manager.default == "north"
        manager.set_override("tenant", "acme")
        assert manager.default == "acme"

        manager.set_override("landlord", None)
        assert manager.default == "acme"
        manager.set_override("tenant", None)
        assert manager.default == "central"

    def test_assigning_default_keeps_overrides(self):
        manager = ConnectionManager({"central": "sqlite://", "acme": "sqlite://"}, "central")
        manager.set_override("tenant", "acme")

        manager.default = "other"

        assert manager.default == "acme"
        assert manager.override("tenant") == "acme"
        manager.set_override("tenant", None)
        assert manager.default == "other"
