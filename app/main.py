"""FastAPI application factory."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.use_cases.residence import build_residence_expiry_service
from app.config import get_settings
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.notifications import notification_manager
from app.infrastructure.scheduler import ResidenceNotificationScheduler
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, start the residence scheduler and release resources on exit."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    initialize_database()
    notification_manager.bind_loop(asyncio.get_running_loop())

    scheduler = ResidenceNotificationScheduler(
        build_residence_expiry_service,
        interval_hours=settings.residence_check_interval_hours,
    )
    app.state.residence_scheduler = scheduler
    if settings.residence_scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Residence notification scheduler disabled by configuration")

    try:
        yield
    finally:
        scheduler.stop(wait=False)
        notification_manager.bind_loop(None)
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Residence Expiry Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
