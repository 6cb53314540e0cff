"""Rate limit decider — per-client budget check against the trailing window."""

from dataclasses import dataclass
from typing import Optional

from ..contracts import MAX_REQUESTS_PER_MINUTE
from ..errors import ClientNotConfigured, ConfigLookupFailed, InvalidLimit, UpstreamFailure
from ..persistence import PersistenceClient
from ..utils.clock import Clock, utc_now
from ..utils.logging import get_logger

logger = get_logger("ratelimit.decider")

BLOCKED = "blocked"
EXCEEDED = "exceeded"


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int = 0
    reason: Optional[str] = None  # BLOCKED or EXCEEDED when denied


class RateLimitDecider:
    """Allows or denies one request for a client.

    Counting is delegated to the datastore. The count and the access-log
    write are separate statements, so two concurrent checks for the same
    client may both pass on the last unit of budget.
    """

    def __init__(
        self,
        store: PersistenceClient,
        window_minutes: int = 1,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._window_minutes = window_minutes
        self._clock = clock

    async def check(self, client_id: str, method: str, path: str) -> RateLimitDecision:
        """Decide for one request and record it when allowed.

        Raises:
            ClientNotConfigured: the client has no rate limit configuration.
            ConfigLookupFailed: the configuration could not be read.
            UpstreamFailure: counting or recording the request failed.
        """
        try:
            config = await self._store.get_client_config(client_id)
        except Exception as exc:
            logger.error("rate_limit_config_lookup_failed", client_id=client_id, error=str(exc))
            raise ConfigLookupFailed() from exc
        if config is None:
            raise ClientNotConfigured()

        if config["is_blocked"]:
            logger.warning("rate_limit_blocked", client_id=client_id)
            return RateLimitDecision(allowed=False, reason=BLOCKED)

        try:
            count = await self._store.count_recent_requests(client_id, self._window_minutes)
        except Exception as exc:
            logger.error("rate_limit_count_failed", client_id=client_id, error=str(exc))
            raise UpstreamFailure() from exc

        remaining = config["requests_per_minute"] - count
        if remaining <= 0:
            # Denied requests are not logged, so they never consume future budget
            logger.warning(
                "rate_limit_exceeded",
                client_id=client_id,
                limit=config["requests_per_minute"],
                count=count,
            )
            return RateLimitDecision(allowed=False, reason=EXCEEDED)

        try:
            await self._store.insert_access_log(
                client_id,
                {
                    "method": method,
                    "path": path,
                    "timestamp": self._clock().isoformat(),
                },
            )
        except Exception as exc:
            logger.error("access_log_write_failed", client_id=client_id, error=str(exc))
            raise UpstreamFailure() from exc

        return RateLimitDecision(allowed=True, remaining=remaining)

    async def update_limit(self, client_id: str, requests_per_minute: int) -> dict:
        """Persist a new budget for a client, creating its config if needed."""
        if not 0 <= requests_per_minute <= MAX_REQUESTS_PER_MINUTE:
            raise InvalidLimit()
        try:
            config = await self._store.upsert_client_limit(client_id, requests_per_minute)
        except Exception as exc:
            logger.error("rate_limit_update_failed", client_id=client_id, error=str(exc))
            raise UpstreamFailure() from exc
        logger.info("rate_limit_updated", client_id=client_id, requests_per_minute=requests_per_minute)
        return config

    async def get_config(self, client_id: str) -> dict:
        try:
            config = await self._store.get_client_config(client_id)
        except Exception as exc:
            raise ConfigLookupFailed() from exc
        if config is None:
            raise ClientNotConfigured()
        return config

    async def set_blocked(self, client_id: str, is_blocked: bool) -> dict:
        try:
            config = await self._store.set_client_blocked(client_id, is_blocked)
        except Exception as exc:
            logger.error("rate_limit_block_update_failed", client_id=client_id, error=str(exc))
            raise UpstreamFailure() from exc
        if config is None:
            raise ClientNotConfigured()
        logger.info("rate_limit_block_updated", client_id=client_id, is_blocked=is_blocked)
        return config

    async def overview(self) -> dict:
        """All client configs plus total logged requests and blocked-client count."""
        try:
            clients = await self._store.list_client_configs()
            total = await self._store.count_access_logs()
        except Exception as exc:
            raise UpstreamFailure() from exc
        return {
            "clients": clients,
            "total_requests": total,
            "blocked_clients": sum(1 for c in clients if c["is_blocked"]),
        }
