"""Unit tests for the per-entity fan-out scheduler."""

from unittest.mock import MagicMock

import pytest

from tenancy.application.scheduler import TenancyScheduler
from tenancy.infrastructure.settings import SchedulerSettings


class TestEachTenant:
    """Tests for each_tenant."""

    def test_runs_callback_inside_each_tenant(self, tenancy):
        seen = []
        scheduler = TenancyScheduler(tenancy)

        scheduler.each_tenant(lambda tenant: seen.append((tenant.id, tenancy.tenant_id())))

        assert seen == [(1, 1), (2, 2), (3, 3)]
        assert tenancy.tenant_depth == 0

    def test_fail_fast_stops_at_first_failure(self, tenancy):
        visited = []

        def callback(tenant):
            visited.append(tenant.id)
            if tenant.id == 1:
                raise ValueError("tenant 1 failed")

        scheduler = TenancyScheduler(tenancy, SchedulerSettings(fail_fast=True))

        with pytest.raises(ValueError, match="tenant 1 failed"):
            scheduler.each_tenant(callback)

        assert visited == [1]
        assert tenancy.tenant_depth == 0

    def test_collect_mode_visits_all_and_raises_first(self, tenancy):
        visited = []

        def callback(tenant):
            visited.append(tenant.id)
            if tenant.id in (1, 3):
                raise ValueError(f"tenant {tenant.id} failed")

        scheduler = TenancyScheduler(tenancy, SchedulerSettings(fail_fast=False))

        with pytest.raises(ValueError, match="tenant 1 failed"):
            scheduler.each_tenant(callback)

        assert visited == [1, 2, 3]

    def test_collect_mode_without_failures(self, tenancy):
        scheduler = TenancyScheduler(tenancy, SchedulerSettings(fail_fast=False))
        scheduler.each_tenant(lambda tenant: None)

    def test_probe_records_failures(self, tenancy):
        probe = MagicMock()
        scheduler = TenancyScheduler(
            tenancy, SchedulerSettings(fail_fast=False), probe=probe
        )

        def fail(tenant):
            raise RuntimeError(f"tenant {tenant.id} failed")

        with pytest.raises(RuntimeError):
            scheduler.each_tenant(fail)

        probe.iteration_started.assert_called_once_with("tenant", False)
        assert probe.entity_failed.call_count == 3
        probe.iteration_finished.assert_called_once_with("tenant", 3, 3)

    def test_defaults_to_engine_settings(self, tenancy):
        assert TenancyScheduler(tenancy).fail_fast is True


class TestEachLandlord:
    """Tests for each_landlord."""

    def test_runs_callback_inside_each_landlord(self, tenancy):
        seen = []
        TenancyScheduler(tenancy).each_landlord(
            lambda landlord: seen.append(tenancy.landlord_id())
        )

        assert seen == [10, 20]
        assert tenancy.landlord_depth == 0
