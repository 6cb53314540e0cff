"""FastAPI dependency injection providers."""

from fastapi import Depends

from .config import WeatherOpsConfig, get_config
from .database import get_session_factory
from .monitoring import MetricAnomalyEvaluator, RapidChangeDetector
from .notifications import OperatorNotifier
from .persistence import PersistenceClient
from .ratelimit import RateLimitDecider

_config_instance: WeatherOpsConfig | None = None
_persistence_client: PersistenceClient | None = None
_operator_notifier: OperatorNotifier | None = None


def get_app_config() -> WeatherOpsConfig:
    """Get the application config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = get_config()
    return _config_instance


def get_persistence_client() -> PersistenceClient:
    """Get the persistence client singleton bound to the app's session factory."""
    global _persistence_client
    if _persistence_client is None:
        _persistence_client = PersistenceClient(get_session_factory(get_app_config()))
    return _persistence_client


def get_operator_notifier() -> OperatorNotifier:
    global _operator_notifier
    if _operator_notifier is None:
        _operator_notifier = OperatorNotifier(get_app_config())
    return _operator_notifier


def get_metric_evaluator(
    store: PersistenceClient = Depends(get_persistence_client),
    notifier: OperatorNotifier = Depends(get_operator_notifier),
    config: WeatherOpsConfig = Depends(get_app_config),
) -> MetricAnomalyEvaluator:
    return MetricAnomalyEvaluator(
        store,
        notifier,
        RapidChangeDetector(store, cpu_delta=config.rapid_change_cpu_delta),
    )


def get_rate_limit_decider(
    store: PersistenceClient = Depends(get_persistence_client),
    config: WeatherOpsConfig = Depends(get_app_config),
) -> RateLimitDecider:
    return RateLimitDecider(store, window_minutes=config.rate_limit_window_minutes)
