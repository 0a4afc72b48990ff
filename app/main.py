# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import build_sqlalchemy_db_url, settings
from app.database import Base, engine
from app import models  # noqa: F401  # register every table on Base.metadata
from app.api.routes.health import router as health_router
from app.routers import catalog, users


def create_app() -> FastAPI:
    logging.getLogger("app").setLevel(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Avoid accidental schema changes in shared databases; sqlite is created on demand.
        if build_sqlalchemy_db_url(settings).startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        yield

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router)
    application.include_router(users.router, prefix="/users", tags=["users"])
    application.include_router(catalog.router)
    return application


app = create_app()
