"""Rapid-change detection against the last stored snapshot."""

from pydantic import ValidationError

from ..contracts import Alert, MetricSnapshot
from ..persistence import PersistenceClient
from ..utils.logging import get_logger
from ..utils.outcome import Outcome

logger = get_logger("monitoring.history")


class RapidChangeDetector:
    """Compares the current CPU reading with the most recent system log entry.

    Only entries written for an anomaly carry a snapshot, so the comparison
    is against the last anomalous reading, not the last observed one. A
    notification-failure entry written after a critical anomaly becomes the
    latest entry and carries no snapshot, so the next check has nothing to
    compare with.
    """

    def __init__(self, store: PersistenceClient, cpu_delta: float = 30.0):
        self._store = store
        self._cpu_delta = cpu_delta

    async def check(self, current: MetricSnapshot) -> Outcome[list[Alert]]:
        """Return rapid-change alerts, or a failed Outcome if history is unreadable."""
        try:
            entry = await self._store.latest_system_log()
        except Exception as exc:
            return Outcome.failure(str(exc))

        previous = self._previous_snapshot(entry)
        if previous is None:
            return Outcome.success([])

        delta = current.cpu - previous.cpu
        if delta > self._cpu_delta:
            logger.info("rapid_cpu_change", previous=previous.cpu, current=current.cpu)
            return Outcome.success([Alert(
                type="rapid_change",
                severity="warning",
                message=f"CPU usage rose rapidly from {previous.cpu}% to {current.cpu}%",
            )])
        return Outcome.success([])

    @staticmethod
    def _previous_snapshot(entry: dict | None) -> MetricSnapshot | None:
        if not entry:
            return None
        raw = entry.get("error_details", {}).get("metrics")
        if not isinstance(raw, dict):
            return None
        try:
            return MetricSnapshot.model_validate(raw)
        except ValidationError:
            logger.debug("previous_snapshot_unreadable", log_id=entry.get("id"))
            return None
