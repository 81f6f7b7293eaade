from fastapi import FastAPI

from .activities import router as activities_router
from .email import router as email_router
from .notifications import router as notifications_router
from .preferences import router as preferences_router
from .users import router as users_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(preferences_router)
    app.include_router(activities_router)
    app.include_router(users_router)
    app.include_router(email_router)
