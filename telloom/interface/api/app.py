"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from telloom.config import Settings
from telloom.interface.api.errors import register_error_handlers
from telloom.interface.api.routes import access, health, invitations, roles
from telloom.util.di.container import create_container, setup_di
from telloom.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to serve requests from. Defaults to the
            production container built from environment settings.
    """
    settings = Settings()

    app_instance = FastAPI(
        title="Telloom Access API",
        description="Identity and access core for Telloom: partition "
        "resolution, access checks, invitations and role routing",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Active-Role",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(access.router)
    app_instance.include_router(invitations.router)
    app_instance.include_router(roles.router)

    return app_instance
