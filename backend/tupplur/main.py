"""
Tupplur Backend - FastAPI Application

A schema-driven document store on top of an ordered key-value backend.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tupplur.config import get_settings
from tupplur.database.connections import close_connections, get_kv_store
from tupplur.database.kv_store import StorageError
from tupplur.routers import api, collections, health

logger = logging.getLogger("tupplur")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Build the key-value store for the configured backend

    Shutdown:
    - Close all database connections
    """
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info(f"Starting Tupplur backend ({settings.kv_backend} backend)")
    if not settings.super_user_key:
        logger.warning("SUPER_USER_KEY is not set; collection management is disabled")

    await get_kv_store()

    yield

    logger.info("Shutting down Tupplur backend...")
    await close_connections()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title="Tupplur API",
    description="""
## Schema-driven document store

### Collections
Managed by the super-user (`Authorization: Bearer <SUPER_USER_KEY>`):
register a collection with a JSON-Schema and access rules.

### Documents
`/api/{name}` routes are guarded by the collection's access rules. A rule
keyed `public` applies to everyone; any other key is a bearer token.
Array-of-object properties are sub-collections, addressable at
`/api/{name}/{id}/{key}`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable"},
    )


# Include routers
app.include_router(health.router)
app.include_router(collections.router)
app.include_router(api.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Tupplur API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
