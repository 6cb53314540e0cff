"""System monitor routes — anomaly evaluation and log history."""

from fastapi import APIRouter, Depends, Query, Request

from ...contracts import EvaluationResult, SystemLogResponse, parse_monitor_request
from ...dependencies import get_metric_evaluator, get_persistence_client
from ...errors import InvalidInput, UpstreamFailure
from ...monitoring import MetricAnomalyEvaluator
from ...persistence import PersistenceClient
from ..request_body import read_json_body

router = APIRouter(prefix="/system-monitor", tags=["system-monitor"])

LOG_LEVELS = ("INFO", "WARNING", "ERROR")


@router.post("", response_model=EvaluationResult, response_model_exclude_none=True)
async def evaluate_metrics(
    request: Request,
    evaluator: MetricAnomalyEvaluator = Depends(get_metric_evaluator),
):
    """Evaluate a metric snapshot against anomaly rules."""
    body = parse_monitor_request(await read_json_body(request))
    return await evaluator.evaluate(body.metrics, body.rules)


@router.get("/logs", response_model=list[SystemLogResponse])
async def list_system_logs(
    limit: int = Query(10, ge=1, le=100),
    level: str | None = Query(None),
    store: PersistenceClient = Depends(get_persistence_client),
):
    """Most recent system log entries, optionally filtered by level."""
    if level:
        level = level.upper()
        if level not in LOG_LEVELS:
            raise InvalidInput(f"level must be one of {', '.join(LOG_LEVELS)}")
    try:
        return await store.list_system_logs(limit=limit, log_level=level)
    except Exception as exc:
        raise UpstreamFailure() from exc
