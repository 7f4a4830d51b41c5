"""
FastAPI application entry point for the Maternity Health Service.

This module configures and creates the FastAPI application with:
- Structured JSON logging with request id propagation
- Dependency injection of services and repositories via Depends()
- Consistent error responses via setup_exception_handlers()
- Lifespan management: key-value store initialization

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware: LoggingMiddleware, CORSMiddleware              │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py         - /health, /ready                  │
    │    ├── patients.py       - Patient registration & lookup    │
    │    ├── records.py        - Records, latest, dashboard       │
    │    └── notifications.py  - Clinician feed                   │
    ├─────────────────────────────────────────────────────────────┤
    │  Services: HealthService, PatientService                    │
    │    RecordBuilder, RecordStore, NotificationDeriver          │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories: PatientRepository, NotificationRepository    │
    ├─────────────────────────────────────────────────────────────┤
    │  KeyValueStore (SQLite)                                     │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from maternity_svc import __version__
from maternity_svc.api.routers import (
    health_router,
    notifications_router,
    patients_router,
    records_router,
)
from maternity_svc.core.config import API_HOST, API_PORT, API_RELOAD
from maternity_svc.core.dependencies import get_store
from maternity_svc.core.exceptions import setup_exception_handlers
from maternity_svc.core.logging_config import setup_logging
from maternity_svc.core.middleware import LoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Configure logging and open the key-value store before serving requests.
    """
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Maternity Health Service...")

    store = get_store()
    logger.info(
        "Key-value store ready",
        extra={"db_path": getattr(store, "db_path", None)}
    )

    yield

    logger.info("Maternity Health Service shutting down...")


def create_app() -> FastAPI:
    """Build the application with handlers, middleware and routers registered."""
    app = FastAPI(
        title="Maternity Health Service",
        description="Pregnancy health record keeping: blood pressure, sugar level, baby movement "
                    "and weekly updates, with clinician notifications for every submission.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    setup_exception_handlers(app)

    # Middleware runs in reverse registration order: logging wraps CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(patients_router)
    app.include_router(records_router)
    app.include_router(notifications_router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "maternity_svc.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
