"""
API routers module.

HTML routers for the registration and dashboard pages plus the
observability endpoints.
"""
from api.routers.health import router as health_router
from api.routers.registration import router as registration_router
from api.routers.dashboard import router as dashboard_router

__all__ = ["health_router", "registration_router", "dashboard_router"]
