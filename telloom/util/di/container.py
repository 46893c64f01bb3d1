"""Production container assembly and FastAPI wiring."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from telloom.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Build the production container.

    Every component uses its production provider, so persistence connects
    to the PostgreSQL URLs in DATABASE__URL and DATABASE__PRIVILEGED_URL.
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    # FastapiProvider exposes the Request to REQUEST-scoped factories
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Serve an application's DishkaRoute handlers from a container.

    Args:
        app: FastAPI application
        container: Container built by create_container or a test builder
    """
    setup_dishka(container, app)
