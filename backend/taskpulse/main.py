import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, settings as default_settings
from .core.errors import install_exception_handlers
from .core.logging_setup import setup_logging
from .db.session import bootstrap, make_engine
from .api import debug, health, tasks

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = app.state.engine
    bootstrap(engine, app.state.settings)
    log.info("%s ready (%s)", app.state.settings.APP_NAME, app.state.settings.ENVIRONMENT)
    yield
    engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = make_engine(settings)

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            log.info("%s %s %d %.1fms", request.method, request.url.path,
                     status, (time.perf_counter() - start) * 1000)

    install_exception_handlers(app)
    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(tasks.router,  prefix=settings.API_PREFIX)
    app.include_router(debug.router,  prefix=settings.API_PREFIX)
    return app


def run() -> None:
    setup_logging(default_settings.LOG_LEVEL)
    log.info("Starting API server on port %d...", default_settings.PORT)
    uvicorn.run("taskpulse.main:create_app", factory=True, host=default_settings.HOST,
                port=default_settings.PORT, log_config=None)
