"""
Liveness check
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from maintenance_desk import __version__
from maintenance_desk.api.deps import get_context
from maintenance_desk.config import settings
from maintenance_desk.context import MaintenanceContext

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

SERVICE_START_TIME = time.time()


class HealthStatus(BaseModel):
    """Health check response model"""
    status: str
    timestamp: str
    uptime_seconds: float
    version: str
    environment: Optional[str] = None
    tickets: int = 0
    staff: int = 0


@router.get("/health", response_model=HealthStatus)
async def health_check(ctx: MaintenanceContext = Depends(get_context)) -> HealthStatus:
    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=round(time.time() - SERVICE_START_TIME, 2),
        version=__version__,
        environment=settings.environment,
        tickets=len(ctx.tickets),
        staff=len(ctx.staff),
    )
