import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from private_sharing.core.config import PACKAGE_DIR, Settings, get_settings, load_app_credentials
from private_sharing.core.logging_config import CorrelationIdMiddleware
from private_sharing.services.session_registry import SessionRegistry
from private_sharing.sharing.client import DigiMeClient
from private_sharing.web import callback, home

logger = logging.getLogger("private_sharing.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Fails startup if the key file is missing
    app.state.credentials = load_app_credentials(settings)
    app.state.session_registry = SessionRegistry(ttl_seconds=settings.SESSION_REGISTRY_TTL)
    app.state.sharing_client = DigiMeClient.from_settings(settings)

    logger.info(
        "Private sharing configured for application %s, contract %s",
        app.state.credentials.application_id,
        app.state.credentials.contract_id,
    )
    try:
        yield
    finally:
        await app.state.sharing_client.aclose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Example integration of digi.me private sharing",
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(CorrelationIdMiddleware)

    # Mount static files
    app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")

    app.include_router(home.router, tags=["Web"])
    app.include_router(callback.router, tags=["Private Sharing"])

    return app


app = create_app()
