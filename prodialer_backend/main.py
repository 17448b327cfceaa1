from __future__ import annotations

import logging
from typing import Dict

from dotenv import load_dotenv

# Load environment variables from .env at project root
# before settings are read by any downstream module.
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prodialer_backend.config import settings
from prodialer_backend.db import init_db
from prodialer_backend.routers import admin_dashboard as admin_dashboard_router
from prodialer_backend.routers import admin_reports as admin_reports_router

logger = logging.getLogger("prodialer.main")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    # Admin panel dev servers
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(admin_dashboard_router.router)
    app.include_router(admin_reports_router.router)

    @app.on_event("startup")
    async def on_startup() -> None:
        """Initialize resources on startup."""
        logger.info("Starting %s...", settings.app_name)
        init_db()
        logger.info("%s started.", settings.app_name)

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok", "app": settings.app_name}

    return app


app = create_app()
