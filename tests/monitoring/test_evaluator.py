"""Tests for MetricAnomalyEvaluator — status, audit log writes, notification."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from weatherops.contracts import AnomalyRuleSet, MetricSnapshot, NetworkMetrics
from weatherops.errors import UpstreamFailure
from weatherops.monitoring.evaluator import MetricAnomalyEvaluator
from weatherops.utils.outcome import Outcome


def _snapshot(cpu=40.0, memory=50.0, disk=60.0, incoming=100.0, outgoing=100.0):
    return MetricSnapshot(
        cpu=cpu,
        memory=memory,
        disk=disk,
        network=NetworkMetrics(incoming=incoming, outgoing=outgoing),
    )


def _make_notifier(outcome=None):
    notifier = MagicMock()
    notifier.notify_critical = AsyncMock(return_value=outcome or Outcome.success())
    return notifier


class TestNormal:
    @pytest.mark.asyncio
    async def test_normal_writes_nothing(self, store):
        notifier = _make_notifier()
        evaluator = MetricAnomalyEvaluator(store, notifier)

        result = await evaluator.evaluate(_snapshot())

        assert result.status == "normal"
        assert result.message == "System is operating normally"
        assert result.alerts is None
        assert await store.list_system_logs() == []
        notifier.notify_critical.assert_not_awaited()


class TestWarning:
    @pytest.mark.asyncio
    async def test_single_warning_is_logged_without_notification(self, store):
        notifier = _make_notifier()
        evaluator = MetricAnomalyEvaluator(store, notifier)

        result = await evaluator.evaluate(_snapshot(memory=88.0))

        assert result.status == "warning"
        assert result.message == "Anomaly detected"
        assert [a.type for a in result.alerts] == ["memory"]

        logs = await store.list_system_logs()
        assert len(logs) == 1
        assert logs[0]["log_level"] == "WARNING"
        assert logs[0]["message"] == "Anomaly detected"
        assert logs[0]["error_details"]["metrics"]["memory"] == 88.0
        assert logs[0]["error_details"]["alerts"][0]["type"] == "memory"
        notifier.notify_critical.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_rules_use_defaults_for_the_rest(self, store):
        evaluator = MetricAnomalyEvaluator(store, _make_notifier())

        result = await evaluator.evaluate(
            _snapshot(cpu=60.0, disk=92.0), AnomalyRuleSet.model_validate({"cpu": 50})
        )

        assert sorted(a.type for a in result.alerts) == ["cpu", "disk"]


class TestCritical:
    @pytest.mark.asyncio
    async def test_critical_logs_error_and_notifies(self, store):
        notifier = _make_notifier()
        evaluator = MetricAnomalyEvaluator(store, notifier)

        result = await evaluator.evaluate(_snapshot(cpu=95.0, incoming=1000.0))

        assert result.status == "critical"
        logs = await store.list_system_logs()
        assert len(logs) == 1
        assert logs[0]["log_level"] == "ERROR"

        notifier.notify_critical.assert_awaited_once()
        notified = notifier.notify_critical.call_args[0][0]
        assert [a.type for a in notified] == ["cpu"]

    @pytest.mark.asyncio
    async def test_notification_failure_writes_one_secondary_entry(self, store):
        notifier = _make_notifier(Outcome.failure("smtp unreachable"))
        evaluator = MetricAnomalyEvaluator(store, notifier)

        result = await evaluator.evaluate(_snapshot(disk=99.0))

        assert result.status == "critical"
        logs = await store.list_system_logs()
        assert len(logs) == 2
        failure = [log for log in logs if log["message"] == "Failed to send anomaly notification"]
        assert len(failure) == 1
        assert failure[0]["log_level"] == "ERROR"
        assert failure[0]["error_details"] == {"error": "smtp unreachable"}

    @pytest.mark.asyncio
    async def test_secondary_entry_failure_is_swallowed(self):
        store = MagicMock()
        store.latest_system_log = AsyncMock(return_value=None)
        store.insert_system_log = AsyncMock(side_effect=[1, RuntimeError("disk full")])
        evaluator = MetricAnomalyEvaluator(store, _make_notifier(Outcome.failure("down")))

        result = await evaluator.evaluate(_snapshot(cpu=99.0))

        assert result.status == "critical"
        assert store.insert_system_log.await_count == 2


class TestRapidChange:
    @pytest.mark.asyncio
    async def test_rapid_change_added_to_threshold_alerts(self, store):
        evaluator = MetricAnomalyEvaluator(store, _make_notifier())
        await evaluator.evaluate(_snapshot(cpu=40.0, memory=88.0))

        result = await evaluator.evaluate(_snapshot(cpu=71.0, memory=88.0))

        assert result.status == "warning"
        assert sorted(a.type for a in result.alerts) == ["memory", "rapid_change"]
        rapid = [a for a in result.alerts if a.type == "rapid_change"][0]
        assert rapid.severity == "warning"

    @pytest.mark.asyncio
    async def test_normal_readings_do_not_update_history(self, store):
        evaluator = MetricAnomalyEvaluator(store, _make_notifier())
        await evaluator.evaluate(_snapshot(cpu=10.0, memory=88.0))
        await evaluator.evaluate(_snapshot(cpu=35.0))

        result = await evaluator.evaluate(_snapshot(cpu=45.0))

        # Compared against the last anomalous reading (10), not the last observed (35)
        assert [a.type for a in result.alerts] == ["rapid_change"]

    @pytest.mark.asyncio
    async def test_notification_failure_entry_hides_previous_snapshot(self, store):
        evaluator = MetricAnomalyEvaluator(
            store, _make_notifier(Outcome.failure("no notification channel configured"))
        )
        await evaluator.evaluate(_snapshot(cpu=10.0, memory=95.0))

        latest = await store.latest_system_log()
        assert latest["message"] == "Failed to send anomaly notification"

        result = await evaluator.evaluate(_snapshot(cpu=60.0, memory=95.0))

        # Latest entry carries no metrics, so the 50 point jump goes unreported
        assert [a.type for a in result.alerts] == ["memory"]

    @pytest.mark.asyncio
    async def test_history_failure_keeps_threshold_alerts(self):
        store = MagicMock()
        store.latest_system_log = AsyncMock(side_effect=RuntimeError("timeout"))
        store.insert_system_log = AsyncMock(return_value=1)
        evaluator = MetricAnomalyEvaluator(store, _make_notifier())

        result = await evaluator.evaluate(_snapshot(cpu=85.0))

        assert result.status == "warning"
        assert [a.type for a in result.alerts] == ["cpu"]
        store.insert_system_log.assert_awaited_once()


class TestLogWriteFailure:
    @pytest.mark.asyncio
    async def test_anomaly_log_failure_is_fatal(self):
        store = MagicMock()
        store.latest_system_log = AsyncMock(return_value=None)
        store.insert_system_log = AsyncMock(side_effect=RuntimeError("read-only database"))
        notifier = _make_notifier()
        evaluator = MetricAnomalyEvaluator(store, notifier)

        with pytest.raises(UpstreamFailure):
            await evaluator.evaluate(_snapshot(cpu=99.0))

        notifier.notify_critical.assert_not_awaited()
