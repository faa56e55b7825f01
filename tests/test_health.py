"""Tests for the health decision table."""

from datetime import timedelta

import pytest

from payroll_integration.services.health import HealthState, evaluate_health
from tests.conftest import NOW

RECENT = NOW - timedelta(minutes=30)
STALE = NOW - timedelta(hours=5)


class TestEvaluateHealth:
    def test_no_runs_at_all(self):
        health = evaluate_health(None, None, 0, NOW)

        assert health.status is HealthState.NO_DATA
        assert health.status.value == "No data yet"
        assert "first import" in health.description

    def test_no_runs_wins_over_failures(self):
        assert evaluate_health(None, None, 3, NOW).status is HealthState.NO_DATA

    def test_healthy(self):
        health = evaluate_health(RECENT, RECENT, 0, NOW)

        assert health.status is HealthState.HEALTHY
        assert health.description == "Imports and exports are running as expected."

    @pytest.mark.parametrize(
        "last_import,last_export",
        [(RECENT, STALE), (STALE, RECENT), (RECENT, RECENT), (RECENT, None)],
    )
    def test_degraded_with_failures_and_some_recent_run(self, last_import, last_export):
        health = evaluate_health(last_import, last_export, 2, NOW)

        assert health.status is HealthState.DEGRADED

    def test_stale_runs_without_failures_need_attention(self):
        assert evaluate_health(STALE, STALE, 0, NOW).status is HealthState.ATTENTION

    def test_only_one_recent_run_without_failures_needs_attention(self):
        assert evaluate_health(RECENT, STALE, 0, NOW).status is HealthState.ATTENTION
        assert evaluate_health(RECENT, None, 0, NOW).status is HealthState.ATTENTION

    def test_failures_and_stale_runs_need_attention(self):
        health = evaluate_health(STALE, STALE, 4, NOW)

        assert health.status is HealthState.ATTENTION
        assert health.description == "No recent successful runs. Investigate the integration log."

    def test_exactly_two_hours_ago_is_not_recent(self):
        edge = NOW - timedelta(hours=2)

        assert evaluate_health(edge, edge, 0, NOW).status is HealthState.ATTENTION

    def test_just_inside_window_is_recent(self):
        inside = NOW - timedelta(hours=2) + timedelta(seconds=1)

        assert evaluate_health(inside, inside, 0, NOW).status is HealthState.HEALTHY

    def test_same_inputs_same_output(self):
        first = evaluate_health(RECENT, STALE, 1, NOW)
        second = evaluate_health(RECENT, STALE, 1, NOW)

        assert first == second
