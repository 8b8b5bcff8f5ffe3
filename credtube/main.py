"""
CredTube Backend - FastAPI Application

Main entry point for the application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from credtube.core.config import settings
from credtube.core.database import close_db
from credtube.core.http_client import close_http_client
from credtube.api.v1 import router as api_v1_router


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("credtube")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting CredTube Backend (%s)", settings.ENVIRONMENT)
    yield
    logger.info("Shutting down CredTube Backend")
    await close_http_client()
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="CredTube Backend",
    description="Learning platform backend: YouTube courses, quizzes, and learning tokens.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Health status and environment info.
    """
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
    }


@app.get("/", tags=["Root"])
async def root() -> dict:
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links.
    """
    return {
        "message": "Welcome to CredTube Backend API",
        "docs": "/docs",
        "health": "/health",
    }
