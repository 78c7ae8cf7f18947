from fastapi import FastAPI
from pydantic_settings import BaseSettings
from contextlib import asynccontextmanager
import os
import logging

from transmitter_dashboard.routers.api import router as api_router
from transmitter_dashboard.schemas import AppHealthOK
from transmitter_dashboard.core.service_manager import service_manager
from transmitter_dashboard.core.config_loader import config_loader

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "Rescue Operations Dashboard API"
    debug: bool = True
    # Use the random transmitter generator instead of the remote gateway.
    # If False and no gateway url is configured, startup falls back to emulation.
    # Can be overridden by environment variable or config file
    emulation_mode: bool = os.getenv("EMULATION_MODE", "").lower() == "true" \
        if os.getenv("EMULATION_MODE") else config_loader.get_emulation_mode()


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the telemetry feed on startup and make sure its timer is gone on shutdown."""
    try:
        logger.info(
            "Starting background services in %s mode", "emulation" if settings.emulation_mode else "remote"
        )
        await service_manager.start_services(emulation=settings.emulation_mode)
    except ValueError as e:
        logger.error("Failed to start services: %s, falling back to emulation mode", e)
        await service_manager.start_services(emulation=True)

    try:
        yield
    finally:
        logger.info("Stopping background services")
        service_manager.stop_services()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.get("/", tags=["meta"])
async def read_root() -> dict[str, str]:
    return {"message": settings.app_name}


@app.get("/health", tags=["meta"], response_model=AppHealthOK)
async def healthcheck() -> AppHealthOK:
    return AppHealthOK(status="ok", app=settings.app_name)


# mount API router under /api
app.include_router(api_router, prefix="/api")
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
