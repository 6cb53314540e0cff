"""Metric anomaly evaluator — rules, rapid-change check, audit log, notification."""

from typing import Optional

from ..contracts import DEFAULT_RULES, Alert, AnomalyRuleSet, EvaluationResult, MetricSnapshot
from ..errors import UpstreamFailure
from ..notifications.notifier import OperatorNotifier
from ..persistence import PersistenceClient
from ..utils.logging import get_logger
from .history import RapidChangeDetector
from .rules import evaluate_thresholds, has_critical, overall_status

logger = get_logger("monitoring.evaluator")

ANOMALY_MESSAGE = "Anomaly detected"
NORMAL_MESSAGE = "System is operating normally"
NOTIFY_FAILED_MESSAGE = "Failed to send anomaly notification"


class MetricAnomalyEvaluator:
    """Decides normal / warning / critical for one metric snapshot.

    Side effects happen only when at least one alert fires: one system log
    entry (fatal on failure), then a notification for critical alerts
    (failure is recorded as a second log entry and otherwise ignored).
    """

    def __init__(
        self,
        store: PersistenceClient,
        notifier: OperatorNotifier,
        rapid_change: Optional[RapidChangeDetector] = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._rapid_change = rapid_change or RapidChangeDetector(store)

    async def evaluate(
        self, metrics: MetricSnapshot, rules: Optional[AnomalyRuleSet] = None
    ) -> EvaluationResult:
        alerts = evaluate_thresholds(metrics, rules or DEFAULT_RULES)

        history = await self._rapid_change.check(metrics)
        if history.ok:
            alerts.extend(history.value or [])
        else:
            logger.warning("history_fetch_failed", error=history.error)

        if not alerts:
            return EvaluationResult(status="normal", message=NORMAL_MESSAGE)

        status = overall_status(alerts)
        logger.warning(
            "anomaly_detected",
            status=status,
            alert_types=[a.type for a in alerts],
        )

        try:
            await self._store.insert_system_log(
                log_level="ERROR" if has_critical(alerts) else "WARNING",
                message=ANOMALY_MESSAGE,
                error_details={
                    "alerts": [a.model_dump() for a in alerts],
                    "metrics": metrics.model_dump(),
                },
            )
        except Exception as exc:
            logger.error("anomaly_log_write_failed", error=str(exc))
            raise UpstreamFailure() from exc

        critical = [a for a in alerts if a.severity == "critical"]
        if critical:
            await self._notify(critical)

        return EvaluationResult(status=status, message=ANOMALY_MESSAGE, alerts=alerts)

    async def _notify(self, critical: list[Alert]) -> None:
        outcome = await self._notifier.notify_critical(critical)
        if outcome.ok:
            return

        logger.error("notification_failed", error=outcome.error)
        try:
            await self._store.insert_system_log(
                log_level="ERROR",
                message=NOTIFY_FAILED_MESSAGE,
                error_details={"error": outcome.error},
            )
        except Exception as exc:
            logger.error("notification_failure_log_write_failed", error=str(exc))
