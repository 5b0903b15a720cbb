from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from app.settings import settings
from app.logging import configure_logging
from app.error_handlers import attach_error_handlers
from app.container import Container, build_container
from api.router import api_router


def create_app(container: Optional[Container] = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.container = container or build_container(settings)
        try:
            yield
        finally:
            await app.state.container.aclose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    attach_error_handlers(app)
    app.include_router(api_router)
    return app


configure_logging()
app = create_app()
