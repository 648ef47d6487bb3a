from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.errors import register_exception_handlers, unhandled_exception_handler
from app.core.logging import configure_logging, get_logger
from app.core.settings import AppSettings, get_app_settings
from app.routers.books import router as books_router
from app.routers.health import router as health_router
from app.stores import build_book_store

logger = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or get_app_settings()
    configure_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "book_store", None) is None:
            app.state.book_store = build_book_store(settings)
        logger.info(
            "book_api_started",
            backend=settings.store_backend,
            environment=settings.environment,
        )
        yield
        logger.info("book_api_stopped")

    app = FastAPI(title="Book Management API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.book_store = None

    # Registered before CORS so it runs inside it; 500 envelopes keep their CORS headers.
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await unhandled_exception_handler(request, exc)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(books_router)
    return app


app = create_app()
