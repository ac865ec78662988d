"""FastAPI application factory for ScriptCraft.

Creates the app with CORS for local dev servers and the script routes
registered under /api.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scriptcraft import __version__

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="ScriptCraft API",
        description="Unity editor-script generator and round-trip parser",
        version=__version__,
    )

    # CORS for the designer dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routes.scripts import router as scripts_router

    app.include_router(scripts_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        return {"status": "ok", "service": "scriptcraft"}

    logger.info("FastAPI app created with all routes registered")
    return app
