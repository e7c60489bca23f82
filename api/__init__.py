"""
API Module
FastAPI routers for the Medlas application
"""

from config import settings
from api.residents import router as residents_router
from api.medications import router as medications_router
from api.schedules import router as schedules_router
from api.doses import router as doses_router
from api.insights import router as insights_router
from api.chat import router as chat_router

from api.deps import (
    get_db,
    get_current_resident,
    services,
)


__all__ = [
    # Routers
    "residents_router",
    "medications_router",
    "schedules_router",
    "doses_router",
    "insights_router",
    "chat_router",
    # Dependencies
    "get_db",
    "get_current_resident",
    "services",
]


def include_routers(app):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    for router in (
        residents_router,
        medications_router,
        schedules_router,
        doses_router,
        insights_router,
        chat_router,
    ):
        app.include_router(router, prefix=settings.API_PREFIX)
