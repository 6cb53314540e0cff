"""Persistence client — the only component that talks to the datastore.

Wraps an async session factory and a clock. Every method is a single
attempt: SQLAlchemy errors propagate to the caller, which decides whether
the failure is fatal.
"""

import json
from datetime import timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import AccessLog, ClientRateConfig, SystemLog
from .utils.clock import Clock, utc_now


def _loads(raw: Optional[str]) -> dict:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def _as_utc(value):
    # SQLite hands back naive datetimes; stored values are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _log_to_dict(row: SystemLog) -> dict:
    return {
        "id": row.id,
        "log_level": row.log_level,
        "message": row.message,
        "error_details": _loads(row.error_details_json),
        "created_at": _as_utc(row.created_at).isoformat(),
    }


def _config_to_dict(row: ClientRateConfig) -> dict:
    return {
        "client_id": row.client_id,
        "requests_per_minute": row.requests_per_minute,
        "is_blocked": row.is_blocked,
    }


class PersistenceClient:
    """Row lookup, insert, update and count primitives over the ORM models."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    # ── System logs ──

    async def insert_system_log(self, log_level: str, message: str, error_details: dict) -> int:
        """Append a system log entry and return its id."""
        async with self._session_factory() as session:
            row = SystemLog(
                log_level=log_level,
                message=message,
                error_details_json=json.dumps(error_details, default=str),
                created_at=self._clock(),
            )
            session.add(row)
            await session.commit()
            return row.id

    async def latest_system_log(self) -> Optional[dict]:
        """Return the most recently created system log entry, if any."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(SystemLog)
                .order_by(SystemLog.created_at.desc(), SystemLog.id.desc())
                .limit(1)
            )
            row = result.scalar_one_or_none()
            return _log_to_dict(row) if row else None

    async def list_system_logs(self, limit: int = 10, log_level: Optional[str] = None) -> list[dict]:
        async with self._session_factory() as session:
            query = (
                select(SystemLog)
                .order_by(SystemLog.created_at.desc(), SystemLog.id.desc())
                .limit(limit)
            )
            if log_level:
                query = query.where(SystemLog.log_level == log_level)
            result = await session.execute(query)
            return [_log_to_dict(r) for r in result.scalars().all()]

    # ── Client rate configs ──

    async def get_client_config(self, client_id: str) -> Optional[dict]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ClientRateConfig).where(ClientRateConfig.client_id == client_id)
            )
            row = result.scalar_one_or_none()
            return _config_to_dict(row) if row else None

    async def list_client_configs(self) -> list[dict]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ClientRateConfig).order_by(ClientRateConfig.client_id)
            )
            return [_config_to_dict(r) for r in result.scalars().all()]

    async def upsert_client_limit(self, client_id: str, requests_per_minute: int) -> dict:
        """Set a client's requests-per-minute, creating the config row on first write."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ClientRateConfig).where(ClientRateConfig.client_id == client_id)
            )
            row = result.scalar_one_or_none()
            if row:
                row.requests_per_minute = requests_per_minute
            else:
                row = ClientRateConfig(
                    client_id=client_id,
                    requests_per_minute=requests_per_minute,
                    is_blocked=False,
                )
                session.add(row)
            await session.commit()
            return _config_to_dict(row)

    async def set_client_blocked(self, client_id: str, is_blocked: bool) -> Optional[dict]:
        """Update the block flag. Returns None when the client has no config."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ClientRateConfig).where(ClientRateConfig.client_id == client_id)
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            row.is_blocked = is_blocked
            await session.commit()
            return _config_to_dict(row)

    # ── Access logs ──

    async def insert_access_log(self, client_id: str, request_info: dict) -> int:
        async with self._session_factory() as session:
            row = AccessLog(
                client_id=client_id,
                request_info_json=json.dumps(request_info, default=str),
                created_at=self._clock(),
            )
            session.add(row)
            await session.commit()
            return row.id

    async def count_recent_requests(self, client_id: str, minutes: int) -> int:
        """Count access log rows for a client created in the trailing window."""
        since = self._clock() - timedelta(minutes=minutes)
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(AccessLog.id)).where(
                    AccessLog.client_id == client_id,
                    AccessLog.created_at >= since,
                )
            )
            return int(result.scalar_one())

    async def count_access_logs(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count(AccessLog.id)))
            return int(result.scalar_one())
