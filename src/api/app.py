"""FastAPI application serving the donation point directory."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from points import DonationPointService

from .config import get_settings
from .routes import build_points_router


def create_app(
    db_path: Path | str | None = None,
    cors_origins: Sequence[str] | None = None,
) -> FastAPI:
    """Return a configured FastAPI application.

    Arguments left as ``None`` are taken from :func:`api.config.get_settings`.
    """

    settings = get_settings()
    service = DonationPointService(db_path=db_path if db_path is not None else settings.db_path)

    app = FastAPI(title="Pontos de Doação API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins if cors_origins is not None else settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(build_points_router(service))

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok"}

    app.state.point_service = service
    return app


__all__ = ["create_app"]
