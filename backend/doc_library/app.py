"""FastAPI application setup for the document library."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from doc_library.api.dependencies import close_clients, get_app_settings, get_store
from doc_library.api.routes_admin import router as admin_router
from doc_library.api.routes_data import router as data_router
from doc_library.api.routes_library import router as library_router
from doc_library.api.routes_logs import router as logs_router
from doc_library.api.routes_stats import router as stats_router
from doc_library.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Document Library",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(library_router, prefix="", tags=["library"])
app.include_router(stats_router, prefix="/stats", tags=["statistics"])
app.include_router(data_router, prefix="/data", tags=["data"])
app.include_router(logs_router, prefix="/logs", tags=["logs"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.on_event("startup")
async def startup() -> None:
    """Open the local store before the first request."""
    settings = get_app_settings()
    get_store()
    logger.info("Document library API using %s store, backend %s", settings.store_backend, settings.api_origin)


@app.on_event("shutdown")
async def shutdown() -> None:
    await close_clients()
