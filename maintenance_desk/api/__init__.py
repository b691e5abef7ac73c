"""
HTTP adapter over the maintenance context
"""
from maintenance_desk.api.routes import router
from maintenance_desk.api.staff_routes import router as staff_router
from maintenance_desk.api.stats_routes import router as stats_router
from maintenance_desk.api.notification_routes import router as notification_router
from maintenance_desk.api.health_routes import router as health_router

__all__ = ["router", "staff_router", "stats_router", "notification_router", "health_router"]
