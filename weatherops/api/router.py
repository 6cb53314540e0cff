"""Master API router — includes all sub-routers."""

from fastapi import APIRouter

from .routes.rate_limit import router as rate_limit_router
from .routes.system_monitor import router as system_monitor_router

api_router = APIRouter(prefix="/api")

api_router.include_router(system_monitor_router)
api_router.include_router(rate_limit_router)
