from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clubhouse import __version__
from clubhouse.api import create_api_router
from clubhouse.core.config import get_settings
from clubhouse.core.container import ApplicationContainer, get_container
from clubhouse.core.logging import setup_logging
from clubhouse.infrastructure.database.session import init_db
from clubhouse.schemas import HealthResponse

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.logging.directory, settings.logging.level)
    if app.state.container is None:
        app.state.container = get_container()
        await init_db()
    yield


def create_app(container: Optional[ApplicationContainer] = None) -> FastAPI:
    config = container.settings if container is not None else settings
    app = FastAPI(
        title=config.project_name,
        description="Badminton club sessions, waiting list, wallets and weekly settlement",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(config.api_prefix))

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__)

    return app


app = create_app()
