from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import time
import logging

from .api.v1.auth import router as auth_router
from .api.v1.bookings import router as bookings_router
from .api.v1.reports import router as reports_router
from .api.v1.slots import router as slots_router
from .core.config import settings
from .core.exceptions import ClinicBookingError, SessionError
from .core.security import SessionIssuer
from .repositories.base import ReservationStore
from .repositories.sql import SQLAlchemyStore
from .services.auth_service import AuthService
from .services.calendar_service import seed_slots
from .services.reporting_service import ReportingService
from .services.reservation_service import ReservationService

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize storage and seed data on startup, release it on shutdown."""
    logger.info(f"Starting {settings.APP_NAME}...")

    store: ReservationStore = app.state.store
    try:
        store.init()
        if settings.SEED_ADMIN:
            app.state.auth_service.seed_admin()
        seed_slots(store)
        logger.info("Storage initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize storage: {str(e)}")
        raise

    logger.info("Application startup complete")
    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    store.close()

def create_app(store: Optional[ReservationStore] = None) -> FastAPI:
    """Create the application around a store (SQL database from settings by default)."""
    if store is None:
        store = SQLAlchemyStore(settings.DATABASE_URL)
        db_type = "SQLite" if settings.DATABASE_URL.startswith("sqlite") else "SQL"
        logger.info(f"Using {db_type} database")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Appointment booking backend for patients and clinic administrators",
        openapi_url="/api/v1/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Services are shared by every request so the ledger lock is process wide
    issuer = SessionIssuer(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        ttl=timedelta(hours=settings.SESSION_TTL_HOURS),
    )
    reservation_service = ReservationService(store)
    app.state.store = store
    app.state.session_issuer = issuer
    app.state.auth_service = AuthService(store, issuer)
    app.state.reservation_service = reservation_service
    app.state.reporting_service = ReportingService(reservation_service)

    # Middleware setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Only add TrustedHostMiddleware in production, not in testing
    if not settings.TESTING:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=["localhost", "127.0.0.1", "*.localhost", "testserver"]
        )

    # Custom middleware for request logging and timing
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        # Log request
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

    # Exception handlers
    @app.exception_handler(ClinicBookingError)
    async def domain_error_handler(request: Request, exc: ClinicBookingError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, SessionError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": "The requested resource was not found",
                "path": str(request.url.path)
            }
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred"
            }
        )

    # Include routers
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(slots_router, prefix="/api/v1")
    app.include_router(bookings_router, prefix="/api/v1")
    app.include_router(reports_router, prefix="/api/v1")

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": settings.VERSION
        }

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.APP_NAME} API",
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/health"
        }

    # API Info endpoint
    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.APP_NAME,
            "version": settings.VERSION,
            "endpoints": {
                "authentication": "/api/v1/auth",
                "slots": "/api/v1/slots",
                "bookings": "/api/v1/bookings",
                "reports": "/api/v1/reports",
                "docs": "/docs",
                "openapi": "/api/v1/openapi.json"
            }
        }

    return app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinic_booking.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
