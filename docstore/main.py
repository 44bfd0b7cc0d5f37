from contextlib import asynccontextmanager
from typing import Optional
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docstore.api.http.documents import router as documents_router
from docstore.api.http.health import router as health_router
from docstore.core.config import Settings, settings as default_settings
from docstore.core.db import build_engine, build_session_factory, init_db
from docstore.core.logging import setup_logging
from docstore.domains.storage.resolver import StorageStrategyResolver
from docstore.infrastructure.object_store import ObjectStoreClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    object_store: Optional[ObjectStoreClient] = None
) -> FastAPI:
    settings = settings or default_settings
    resolver = StorageStrategyResolver(settings)

    # Клиент S3 создается и при одном только bucket, чтобы записи с тегом s3 оставались доступны
    if object_store is None and (resolver.is_object_storage() or settings.s3_bucket_name):
        object_store = ObjectStoreClient.from_settings(settings)

    engine = build_engine(settings.database_url, echo=settings.sql_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        await init_db(engine)
        if resolver.is_filesystem_storage():
            os.makedirs(settings.upload_dir, exist_ok=True)
        logger.info(f"Database connected, storage backend: {resolver.active_backend.value}")
        yield
        await engine.dispose()

    app = FastAPI(
        title="DocStore",
        description="Document upload, listing, viewing and deletion with pluggable storage",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.resolver = resolver
    app.state.object_store = object_store
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(documents_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт - краткая информация об API"""
        return {
            "message": "DocStore API",
            "version": app.version,
            "storage": resolver.active_backend.value,
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()


def run() -> None:
    """Точка входа для консоли"""
    import uvicorn

    uvicorn.run("docstore.main:app", host="0.0.0.0", port=default_settings.port)
