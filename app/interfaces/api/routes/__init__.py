from fastapi import FastAPI

from .auth import router as auth_router
from .notifications import router as notifications_router
from .residence import router as residence_router
from .staff import router as staff_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(staff_router)
    app.include_router(residence_router)
    app.include_router(notifications_router)
