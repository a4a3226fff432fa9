"""
FastAPI application entry point for the QSL card backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qsl_backend.config import get_settings
from qsl_backend.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="QSL Card Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "GET", "OPTIONS", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
