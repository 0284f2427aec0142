"""
Main FastAPI application for ledger_auth
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from ledger_auth.core.config import settings
from ledger_auth.core.database import SessionLocal, init_db, dispose_db
from ledger_auth.core.exceptions import AuthError
from ledger_auth.core.logging_config import configure_logging
from ledger_auth.middleware import RequestIDMiddleware
from ledger_auth.services.identity_store import IdentityStore
from ledger_auth.services.user_service import UserService

# Import routers
from ledger_auth.api.v1.endpoints import auth, mfa, users

configure_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION} in {settings.ENVIRONMENT} mode")

    # In production, use migrations instead
    if settings.ENVIRONMENT == "development":
        init_db()
        if settings.SEED_DEFAULT_USERS:
            db = SessionLocal()
            try:
                UserService(IdentityStore(db)).seed_defaults(settings)
            finally:
                db.close()

    yield

    logger.info("Shutting down...")
    dispose_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Ledger Auth - credentials, TOTP second factor and session tokens",
    lifespan=lifespan
)

app.add_middleware(RequestIDMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Map typed authentication outcomes to their HTTP status"""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "Internal server error",
            "detail": str(exc) if settings.DEBUG else None,
        },
    )


# Health check endpoint
@app.get("/health")
def health_check():
    """Health check endpoint"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        database_status = "healthy"
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        database_status = "unhealthy"
    finally:
        db.close()

    return {
        "status": "healthy" if database_status == "healthy" else "degraded",
        "version": settings.VERSION,
        "checks": {
            "database": database_status,
        }
    }


# Root endpoint
@app.get("/")
def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "docs_url": "/docs",
    }


# Include API routers
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["authentication"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/user", tags=["users"])
app.include_router(mfa.router, prefix=f"{settings.API_PREFIX}/mfa", tags=["mfa"])
