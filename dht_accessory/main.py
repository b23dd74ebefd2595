from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.config import settings
from .core.log import configure_logging

from .api.routes import router as api_router
import dht_accessory.api.routes as routes_module

from .services.manager import AccessoryManager


logger = logging.getLogger(__name__)


# --- Singletons ---
manager = AccessoryManager.from_settings(settings)


def get_manager() -> AccessoryManager:
    return manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level, settings.log_file)
    logger.info("Starting %s (%d accessories)", settings.app_name, len(manager.pollers()))

    await manager.start()

    try:
        yield
    finally:
        await manager.stop()
        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Make the dependency functions in routes resolve to the real ones
app.dependency_overrides[routes_module.get_manager] = get_manager

app.include_router(api_router, prefix="/api")
