"""Rate limit routes — per-request check, limit updates, client administration."""

from fastapi import APIRouter, Depends, Header, Request

from ...contracts import (
    BlockUpdate,
    ClientConfigResponse,
    LimitUpdateResponse,
    RateLimitCheckResponse,
    RateLimitOverview,
    parse_limit_update,
)
from ...dependencies import get_rate_limit_decider
from ...errors import ClientBlocked, MissingClientId, RateLimitExceeded
from ...ratelimit import BLOCKED, RateLimitDecider
from ..request_body import read_json_body

router = APIRouter(tags=["rate-limit"])


def _require_client_id(x_client_id: str | None) -> str:
    if x_client_id is None or not x_client_id.strip():
        raise MissingClientId()
    return x_client_id.strip()


@router.get("/rate-limit-check", response_model=RateLimitCheckResponse)
async def check_rate_limit(
    request: Request,
    x_client_id: str | None = Header(None),
    decider: RateLimitDecider = Depends(get_rate_limit_decider),
):
    """Allow or deny the calling client's request."""
    client_id = _require_client_id(x_client_id)
    decision = await decider.check(client_id, request.method, request.url.path)
    if not decision.allowed:
        if decision.reason == BLOCKED:
            raise ClientBlocked()
        raise RateLimitExceeded()
    return RateLimitCheckResponse(allowed=True, remaining=decision.remaining)


@router.put("/rate-limit-check", response_model=LimitUpdateResponse)
async def update_rate_limit(
    request: Request,
    x_client_id: str | None = Header(None),
    decider: RateLimitDecider = Depends(get_rate_limit_decider),
):
    """Set the calling client's requests-per-minute budget."""
    client_id = _require_client_id(x_client_id)
    limit = parse_limit_update(await read_json_body(request))
    await decider.update_limit(client_id, limit)
    return LimitUpdateResponse(updated_limit=limit)


@router.get("/rate-limit/clients", response_model=RateLimitOverview)
async def list_clients(decider: RateLimitDecider = Depends(get_rate_limit_decider)):
    """All configured clients with request and block totals."""
    return await decider.overview()


@router.get("/rate-limit/clients/{client_id}", response_model=ClientConfigResponse)
async def get_client(client_id: str, decider: RateLimitDecider = Depends(get_rate_limit_decider)):
    return await decider.get_config(client_id)


@router.put("/rate-limit/clients/{client_id}/block", response_model=ClientConfigResponse)
async def set_client_block(
    client_id: str,
    body: BlockUpdate,
    decider: RateLimitDecider = Depends(get_rate_limit_decider),
):
    """Block or unblock a configured client."""
    return await decider.set_blocked(client_id, body.is_blocked)
