"""
Auth Service FastAPI Application

Main entry point for the authentication and session API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB

# App-specific imports
from auth_app.config import settings
from auth_app.error_handlers import register_error_handlers

# Import routers
from auth_app.routers import auth_router, user_router

# Import service initialization
from auth_app.dependencies import init_all_services, ensure_all_indexes


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    logger.info("Starting Auth Service API...")

    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )
    logger.info(f"Connected to database: {settings.MONGODB_DATABASE}")

    init_all_services(db=main_db.db, settings=settings)
    await ensure_all_indexes()
    logger.info("All services initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Auth Service API...")
    await main_db.disconnect()
    logger.info("Auth Service API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Auth Service API",
    description="Registration, OTP verification and per-device sessions",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

register_error_handlers(app)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Include Routers
# =============================================================================
app.include_router(auth_router, tags=["Authentication"])
app.include_router(user_router, tags=["User"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return {
        "status": "ok",
        "version": "1.0.0",
        "database": main_db.is_connected,
    }


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
