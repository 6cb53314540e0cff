"""System monitor — threshold rules, rapid-change detection, anomaly evaluation."""

from .evaluator import MetricAnomalyEvaluator
from .history import RapidChangeDetector
from .rules import evaluate_thresholds, overall_status

__all__ = [
    "MetricAnomalyEvaluator",
    "RapidChangeDetector",
    "evaluate_thresholds",
    "overall_status",
]
