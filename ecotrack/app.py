import json
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecotrack.infra.config.settings import settings
from ecotrack.infra.config.redis import get_redis
from ecotrack.core.logger.logger import logger
from ecotrack.api.router import admin, auth, bags, health, reports, rewards, training, user
from ecotrack.api.middleware.logging.request_logging import RequestLoggingMiddleware
from ecotrack.core.exceptions.handler import ServiceError, GlobalErrorHandler
from ecotrack.core.service.user.store.base import UserDataStore
from ecotrack.core.service.user.store.kv_store import KVUserStore
from ecotrack.core.service.user.store.memory_store import InMemoryUserStore


def create_app(user_store: Optional[UserDataStore] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        user_store: Store to serve from. When omitted, STORE_BACKEND decides:
            "memory" creates an empty in-process store, "redis" connects a
            KV store on startup.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="""
EcoTrack API - phone sign-up, waste bag scanning, litter reports, rewards and training.

## Authentication
Sign up or log in through `/auth` to obtain a bearer token; send it as
`Authorization: Bearer <token>` on every user endpoint.
        """,
        version=settings.APP_VERSION,
        docs_url="/",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,  # 10 minutes
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ServiceError, GlobalErrorHandler.service_error_handler)
    app.add_exception_handler(StarletteHTTPException, GlobalErrorHandler.http_exception_handler)
    app.add_exception_handler(RequestValidationError, GlobalErrorHandler.validation_error_handler)
    app.add_exception_handler(Exception, GlobalErrorHandler.general_exception_handler)

    for module in (health, auth, user, bags, reports, rewards, training, admin):
        app.include_router(module.router, prefix="/api/v1")

    if user_store is None and settings.STORE_BACKEND == "memory":
        user_store = InMemoryUserStore()
    app.state.user_store = user_store

    @app.on_event("startup")
    async def startup_event():
        logger.info(json.dumps({
            "message": "Starting EcoTrack API",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "backend": settings.STORE_BACKEND
        }))

        if app.state.user_store is None:
            if settings.STORE_BACKEND != "redis":
                raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
            app.state.user_store = KVUserStore(await get_redis())

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(json.dumps({
            "message": "Shutting down EcoTrack API",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION
        }))

    return app
