"""Contracts — Pydantic models for metric payloads, alerts and API shapes.

Request bodies are validated here, at the boundary, so the evaluator and the
decider only ever see well-typed values.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidInput, InvalidLimit

# Numbers only: "85" or true must not slip through as a metric value.
Number = Annotated[float, Field(strict=True, allow_inf_nan=False)]

AlertType = Literal[
    "cpu", "memory", "disk", "network_incoming", "network_outgoing", "rapid_change"
]
Severity = Literal["warning", "critical"]
LogLevel = Literal["INFO", "WARNING", "ERROR"]

# Upper bound of the requests_per_minute INTEGER column
MAX_REQUESTS_PER_MINUTE = 2**31 - 1


# ── Metrics ──
class NetworkMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    incoming: Number
    outgoing: Number


class MetricSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpu: Number
    memory: Number
    disk: Number
    network: NetworkMetrics


class NetworkThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    incoming: Number = 900
    outgoing: Number = 700


class AnomalyRuleSet(BaseModel):
    """Per-metric thresholds. Fields left out fall back to the defaults."""

    model_config = ConfigDict(frozen=True)

    cpu: Number = 80
    memory: Number = 85
    disk: Number = 90
    network: NetworkThresholds = Field(default_factory=NetworkThresholds)


DEFAULT_RULES = AnomalyRuleSet()


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: AlertType
    severity: Severity
    message: str


class MonitorRequest(BaseModel):
    metrics: MetricSnapshot
    rules: Optional[AnomalyRuleSet] = None


class EvaluationResult(BaseModel):
    status: Literal["normal", "warning", "critical"]
    message: str
    alerts: Optional[list[Alert]] = None


# ── Rate limiting ──
class RateLimitCheckResponse(BaseModel):
    allowed: bool
    remaining: int


class LimitUpdateResponse(BaseModel):
    success: bool = True
    updated_limit: int


class ClientConfigResponse(BaseModel):
    client_id: str
    requests_per_minute: int
    is_blocked: bool


class RateLimitOverview(BaseModel):
    clients: list[ClientConfigResponse] = []
    total_requests: int = 0
    blocked_clients: int = 0


class BlockUpdate(BaseModel):
    is_blocked: StrictBool


# ── System logs ──
class SystemLogResponse(BaseModel):
    id: int
    log_level: LogLevel
    message: str
    error_details: dict = {}
    created_at: str


def _describe_error(exc: PydanticValidationError, prefix: str) -> str:
    """Turn the first pydantic error into a field-specific message."""
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err["loc"]) or prefix
    kind = err["type"]
    if kind == "missing":
        return f"Invalid {prefix} data: {field} is required"
    if kind in ("model_type", "model_attributes_type", "dict_type"):
        return f"Invalid {prefix} data: {field} must be an object"
    return f"Invalid {prefix} data: {field} must be a number"


def parse_monitor_request(payload: Any) -> MonitorRequest:
    """Validate a system-monitor request body.

    Raises:
        InvalidInput: metrics missing, empty, or with a missing/non-numeric
            field; or rules present but malformed.
    """
    if not isinstance(payload, dict):
        raise InvalidInput("Request body must be a JSON object")

    metrics = payload.get("metrics")
    if metrics is None or metrics == {}:
        raise InvalidInput("Metrics data is required")
    if not isinstance(metrics, dict):
        raise InvalidInput("Invalid metrics data: metrics must be an object")
    try:
        snapshot = MetricSnapshot.model_validate(metrics)
    except PydanticValidationError as exc:
        raise InvalidInput(_describe_error(exc, "metrics")) from exc

    rules = payload.get("rules")
    rule_set = None
    if rules is not None:
        if not isinstance(rules, dict):
            raise InvalidInput("Invalid rules data: rules must be an object")
        try:
            rule_set = AnomalyRuleSet.model_validate(rules)
        except PydanticValidationError as exc:
            raise InvalidInput(_describe_error(exc, "rules")) from exc

    return MonitorRequest(metrics=snapshot, rules=rule_set)


def parse_limit_update(payload: Any) -> int:
    """Extract a whole ``requests_per_minute`` in ``[0, MAX_REQUESTS_PER_MINUTE]`` from a PUT body."""
    if not isinstance(payload, dict):
        raise InvalidLimit()
    value = payload.get("requests_per_minute")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidLimit()
    if isinstance(value, float):
        # is_integer() is False for inf and nan
        if not value.is_integer():
            raise InvalidLimit()
        value = int(value)
    if not 0 <= value <= MAX_REQUESTS_PER_MINUTE:
        raise InvalidLimit()
    return value
