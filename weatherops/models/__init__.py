"""SQLAlchemy models package."""

from .base import Base
from .system_log import SystemLog
from .client_rate_config import ClientRateConfig
from .access_log import AccessLog

__all__ = [
    "Base",
    "SystemLog",
    "ClientRateConfig",
    "AccessLog",
]
