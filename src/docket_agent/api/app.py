"""
FastAPI application creation and configuration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core import lifespan
from .routes import cases, health, voice_notes


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""

    app = FastAPI(
        title="Docket Agent",
        description="Voice-note driven case resolution and workflow orchestration for law practices",
        version="1.0.0",
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include health check routes at root
    app.include_router(health.router, tags=["health"])

    # Include workflow routes
    app.include_router(voice_notes.router, prefix="/voice-notes", tags=["voice-notes"])
    app.include_router(cases.router, prefix="/cases", tags=["cases"])

    return app
