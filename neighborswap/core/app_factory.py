from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.auth_service import AuthService
from ..application.services.listing_service import ListingService
from ..application.services.seed_service import SeedService
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..infrastructure.storage.local import LocalImageStorage
from ..presentation.api.errors import register_error_handlers
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import products as products_router
from ..presentation.api.routers import system as system_router
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads"


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="NeighborSwap", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(products_router.router)
    app.include_router(users_router.router)
    app.include_router(system_router.router)

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")

    return app


def build_container(settings: Settings) -> ApplicationContainer:
    persistence = SQLitePersistence(settings.database_path)
    image_store = LocalImageStorage(settings.upload_dir, public_prefix=UPLOADS_PREFIX)
    auth_service = AuthService(
        user_repository=persistence,
        jwt_secret=settings.jwt_secret,
        jwt_algorithm=settings.jwt_algorithm,
        jwt_expiration_hours=settings.jwt_expiration_hours,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    listing_service = ListingService(
        persistence,
        image_store,
        result_limit=settings.listing_result_limit,
        max_images=settings.max_images_per_listing,
        max_image_bytes=settings.max_upload_bytes,
    )
    seed_service = SeedService(persistence, bcrypt_rounds=settings.bcrypt_rounds)
    return ApplicationContainer(
        settings=settings,
        persistence=persistence,
        image_store=image_store,
        auth_service=auth_service,
        listing_service=listing_service,
        seed_service=seed_service,
    )


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        container = build_container(settings)
        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Store ready at %s", settings.database_path)
        try:
            yield
        finally:
            container.persistence.close()

    return lifespan
