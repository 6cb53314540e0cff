"""Threshold rules for system metric snapshots.

Pure functions, no I/O. A metric raises an alert only when it is strictly
above its threshold; cpu and memory escalate to critical above 90, disk
above 95. Network alerts never escalate.
"""

from ..contracts import DEFAULT_RULES, Alert, AnomalyRuleSet, MetricSnapshot

CPU_CRITICAL = 90.0
MEMORY_CRITICAL = 90.0
DISK_CRITICAL = 95.0


def _severity(value: float, critical_above: float) -> str:
    return "critical" if value > critical_above else "warning"


def evaluate_thresholds(
    metrics: MetricSnapshot, rules: AnomalyRuleSet = DEFAULT_RULES
) -> list[Alert]:
    """Return one alert per metric that exceeds its threshold."""
    alerts: list[Alert] = []

    if metrics.cpu > rules.cpu:
        alerts.append(Alert(
            type="cpu",
            severity=_severity(metrics.cpu, CPU_CRITICAL),
            message=f"CPU usage at {metrics.cpu}% exceeds threshold of {rules.cpu}%",
        ))

    if metrics.memory > rules.memory:
        alerts.append(Alert(
            type="memory",
            severity=_severity(metrics.memory, MEMORY_CRITICAL),
            message=f"Memory usage at {metrics.memory}% exceeds threshold of {rules.memory}%",
        ))

    if metrics.disk > rules.disk:
        alerts.append(Alert(
            type="disk",
            severity=_severity(metrics.disk, DISK_CRITICAL),
            message=f"Disk usage at {metrics.disk}% exceeds threshold of {rules.disk}%",
        ))

    if metrics.network.incoming > rules.network.incoming:
        alerts.append(Alert(
            type="network_incoming",
            severity="warning",
            message=(
                f"Incoming network traffic at {metrics.network.incoming} "
                f"exceeds threshold of {rules.network.incoming}"
            ),
        ))

    if metrics.network.outgoing > rules.network.outgoing:
        alerts.append(Alert(
            type="network_outgoing",
            severity="warning",
            message=(
                f"Outgoing network traffic at {metrics.network.outgoing} "
                f"exceeds threshold of {rules.network.outgoing}"
            ),
        ))

    return alerts


def has_critical(alerts: list[Alert]) -> bool:
    return any(a.severity == "critical" for a in alerts)


def overall_status(alerts: list[Alert]) -> str:
    """normal / warning / critical for a combined alert list."""
    if not alerts:
        return "normal"
    return "critical" if has_critical(alerts) else "warning"
