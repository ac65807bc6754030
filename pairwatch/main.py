from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pairwatch.api.routers.chart import router as chart_router
from pairwatch.api.routers.pairs import router as pairs_router
from pairwatch.api.routers.status import router as status_router
from pairwatch.core.context import AppContext, build_context
from pairwatch.core.logging_config import setup_logging
from pairwatch.shared.config import Settings, get_settings


logger = logging.getLogger(__name__)


def _log_initialize_result(task: asyncio.Task[bool]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("app: scanner_initialize_crashed error=%s", exc, exc_info=exc)
    elif not task.result():
        logger.error("app: scanner_unavailable")


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    settings = settings or (context.settings if context else get_settings())
    context = context or build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        logger.info(
            "app: starting chain=%s factory=%s max_pairs=%s",
            settings.chain_name,
            settings.factory_address,
            settings.max_pairs,
        )
        init_task = asyncio.create_task(context.scanner.initialize())
        init_task.add_done_callback(_log_initialize_result)
        try:
            yield
        finally:
            if not init_task.done():
                init_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await init_task
            await context.scanner.stop()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        lifespan=lifespan,
    )
    app.state.context = context
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(status_router)
    app.include_router(pairs_router)
    app.include_router(chart_router)
    return app


app = create_app()
