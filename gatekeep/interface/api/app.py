"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gatekeep.config import Settings
from gatekeep.interface.api.routes import accounts, auth, health
from gatekeep.util.di.container import create_container, setup_di
from gatekeep.util.jwt import ensure_signing_key
from gatekeep.util.observability import instrument_fastapi, instrument_httpx


def create_app(
    settings: Settings | None = None, container: AsyncContainer | None = None
) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured before calling this function; start_app.py
    does this in production.

    Args:
        settings: Application settings (loaded from the environment if omitted)
        container: DI container (the production container if omitted)

    Raises:
        SigningKeyMisconfiguredError: If the access token signing key is
            missing or too short
    """
    settings = settings or Settings()

    # Refuse to start rather than fail on the first sign-in
    ensure_signing_key(settings.auth.access_token)

    # Instrument httpx for discovery and key fetches
    instrument_httpx()

    app_instance = FastAPI(
        title="Gatekeep API",
        description="Federated sign-in with Google, Microsoft and Facebook identities",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(accounts.router)

    return app_instance
