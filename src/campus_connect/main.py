"""Main entry point for the Campus Connect application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from campus_connect.api.v1 import (
    events_router,
    lost_found_router,
    opportunities_router,
    posts_router,
    students_router,
    votes_router,
)
from campus_connect.core.exceptions import CampusConnectError
from campus_connect.core.logging_config import configure_logging
from campus_connect.core.settings import settings

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Student community API: posts, events, opportunities and lost and found",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(opportunities_router, prefix="/api/v1")
app.include_router(lost_found_router, prefix="/api/v1")
app.include_router(students_router, prefix="/api/v1")


@app.exception_handler(CampusConnectError)
async def campus_connect_error_handler(request: Request, exc: CampusConnectError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=True)
    else:
        logger.debug("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "description": "Student community API: posts, events, opportunities and lost and found",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("campus_connect.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
