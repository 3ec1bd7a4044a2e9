"""
Library API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from api.routes import protected_router, router as books_router
from auth.routes import router as users_router
from config.settings import Settings, config
from database.session import Database

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("asyncio", "sqlalchemy.engine", "multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    app = FastAPI(
        title="Library API",
        version="1.0.0",
        description="Book catalog with signup, login and JWT-protected routes.",
        docs_url="/api-docs",
        redoc_url=None,
        servers=[{"url": settings.server_url}],
    )
    app.state.settings = settings
    app.state.db = None

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(books_router)
    app.include_router(users_router)
    app.include_router(protected_router)

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        if app.state.db is None:
            app.state.db = Database.from_settings(settings)
        await app.state.db.ping()
        logger.info("Server running at %s", settings.server_url)
        logger.info("Swagger docs available at %s/api-docs", settings.server_url)

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.db is not None:
            await app.state.db.dispose()
            app.state.db = None

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
