"""
Main FastAPI application for the Maintenance Desk
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from maintenance_desk import __version__
from maintenance_desk.api import (
    health_router,
    notification_router,
    router,
    staff_router,
    stats_router,
)
from maintenance_desk.config import Settings, settings
from maintenance_desk.context import MaintenanceContext, create_context
from maintenance_desk.middleware.cors import get_cors_origins
from maintenance_desk.security.error_handler import MaintenanceError, maintenance_exception_handler
from maintenance_desk.utils.secure_logging import configure_secure_logging

# Configure secure logging (masks contact details and access codes)
configure_secure_logging(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format_type=settings.log_format,
    include_trace_id=True,
)

logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None, context: Optional[MaintenanceContext] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to honour; defaults to the process-wide settings
        context: Pre-built context (tests inject one with a fixed clock);
            built from ``config`` at startup when omitted
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events"""
        if getattr(app.state, "context", None) is None:
            app.state.context = create_context(config)
        logger.info("Maintenance Desk started (environment=%s)", config.environment)

        yield

        logger.info("Shutting down Maintenance Desk")

    app = FastAPI(
        title="Maintenance Desk",
        description="Maintenance request tracking for residential property management",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(config),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "X-User-Id",
            "X-User-Role",
            "Accept",
            "Origin",
        ],
        max_age=600,
    )

    # Engine errors and HTTP errors share one response shape; anything else
    # never exposes internal details
    app.add_exception_handler(MaintenanceError, maintenance_exception_handler)
    app.add_exception_handler(StarletteHTTPException, maintenance_exception_handler)
    app.add_exception_handler(Exception, maintenance_exception_handler)

    app.include_router(health_router)
    app.include_router(router)
    app.include_router(staff_router)
    app.include_router(stats_router)
    app.include_router(notification_router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "name": "Maintenance Desk",
            "version": __version__,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "create_ticket": "POST /api/tickets",
                "list_tickets": "GET /api/tickets",
                "get_ticket": "GET /api/tickets/{ticket_id}",
                "assign_ticket": "POST /api/tickets/{ticket_id}/assign",
                "change_status": "POST /api/tickets/{ticket_id}/status",
                "add_note": "POST /api/tickets/{ticket_id}/notes",
                "add_feedback": "POST /api/tickets/{ticket_id}/feedback",
                "get_audit": "GET /api/tickets/{ticket_id}/audit",
                "staff": "GET /api/staff",
                "statistics": "GET /api/stats",
                "dashboard": "GET /api/dashboard",
                "notifications": "GET /api/notifications",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
