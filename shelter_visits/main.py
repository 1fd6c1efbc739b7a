"""
FastAPI application for shelter visit scheduling

Public availability and booking endpoints, plus the owner dashboard
for hours, policy and exceptions.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from shelter_visits.api.v1.router import api_v1_router
from shelter_visits.config.settings import get_settings
from shelter_visits.core.errors import SchedulingError
from shelter_visits.core.middleware import correlation_id_middleware, request_logging_middleware
from shelter_visits.core.monitoring import health_router
from shelter_visits.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    logger.info(f"{settings.APP_NAME} starting up...")

    routes = sorted(
        (route.path, ",".join(sorted(route.methods)))
        for route in app.routes
        if isinstance(route, APIRoute)
    )
    for path, methods in routes:
        logger.debug(f"  {methods:20} {path}")
    logger.info(f"Total routes registered: {len(routes)}")

    yield

    # Shutdown
    logger.info(f"{settings.APP_NAME} shutting down...")


async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Translate service-layer errors into HTTP responses"""
    logger.info(
        f"{request.method} {request.url.path} rejected: {exc.message}",
        extra={"status_code": exc.status_code}
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title="Shelter Visit Scheduling API",
        description="Visit availability and booking for adoption organizations",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "PUT"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(SchedulingError, scheduling_error_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "shelter_visits.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
