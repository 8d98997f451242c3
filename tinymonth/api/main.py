from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from .routes import router
from ..config import AppConfig
from ..core.registry import create_store
from ..core.store import DocumentStore
from ..utils.logging_config import setup_logging


def create_app(config: Optional[AppConfig] = None,
               store: Optional[DocumentStore] = None) -> FastAPI:
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(config.log_level, config.log_dir)
        yield

    app = FastAPI(
        title="TinyMonth",
        description="Whole-document persistence endpoint for TinyMonth",
        version=__version__,
        lifespan=lifespan
    )

    app.state.config = config
    app.state.store = store or create_store(config)
    app.include_router(router)

    return app


app = create_app()
