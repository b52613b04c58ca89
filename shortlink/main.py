"""
FastAPI Application Entry Point

create_app() builds the application and configures:
- API routes
- Middleware (logging, CORS)
- Exception handlers
- The Database handle, opened on startup and disposed on shutdown

uvicorn serves it through the factory (shortlink.main:create_app, factory=True),
so importing this module builds no application or engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlink.api import endpoints
from shortlink.api.errors import register_exception_handlers
from shortlink.core.logging_config import configure_logging
from shortlink.core.setting import Settings, settings as default_settings
from shortlink.db.session import Database, get_database
from shortlink.middleware.logging import add_logging_middleware

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database before serving and release it on shutdown."""
    database: Database = app.state.database
    settings: Settings = app.state.settings

    try:
        # Raises PersistenceError when storage is unreachable, aborting startup
        await database.connect(create_schema=settings.AUTO_CREATE_SCHEMA)
        logger.info(f"Serving short URLs under {settings.BASE_URL}")
        yield
    finally:
        await database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Link Shortener Service",
        description="Maps long URLs to short random codes and counts visits",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings.database_url, echo=settings.DB_ECHO)

    register_exception_handlers(app)
    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints defined before router to match before catch-all route
    @app.get("/", tags=["Health"])
    async def root():
        return {
            "message": "Link Shortener Service",
            "version": __version__,
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check(database: Database = Depends(get_database)):
        """Report whether the database answers."""
        if await database.ping():
            return {"status": "healthy"}
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy"}
        )

    app.include_router(endpoints.router, tags=["Link Shortener"])

    return app
