"""
Campus Booking - Main Application
=================================

Resource booking backend for campus rooms, halls and equipment.

Modules:
- Accounts: signup, login and bearer-token authentication
- Resources: resource management and resource/booking queries
- Bookings: conflict-free scheduling and booking lifecycle
- Analytics: booking usage per resource

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database, policy file watcher, scheduler
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

# Configuration and Core
from campus_booking.config import settings
from campus_booking.core import ApplicationException

# Infrastructure
from campus_booking.infrastructure.database import (
    check_database,
    close_database,
    create_tables,
    get_session_context,
    init_database,
)

# Bookings Module - External services
from campus_booking.bookings.application import BookingService
from campus_booking.bookings.infrastructure import (
    BookingCompletionScheduler,
    BookingPolicyManager,
    ResourceLockRegistry,
    SQLAlchemyBookingRepository,
)
from campus_booking.resources.infrastructure import SQLAlchemyResourceRepository

# Module Routers
from campus_booking.accounts.interfaces import accounts_router
from campus_booking.analytics.interfaces import analytics_router
from campus_booking.bookings.interfaces import availability_router, bookings_router, users_router
from campus_booking.resources.interfaces import resources_router

# Middleware and Logging
from campus_booking.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    MetricsMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from campus_booking.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Load booking policy and watch the file
    4. Start booking completion scheduler

    SHUTDOWN:
    1. Stop booking completion scheduler
    2. Stop policy file watcher
    3. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Campus Booking Service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()
    await create_tables()

    logger.info("Loading booking policy")
    policy_manager = BookingPolicyManager()
    policy_manager.load(settings.booking_policy_path)
    policy_manager.start_watching()

    resource_locks = ResourceLockRegistry()

    async def booking_completion_job():
        """Background job completing bookings whose slot has ended."""
        try:
            async with get_session_context() as session:
                service = BookingService(
                    booking_repository=SQLAlchemyBookingRepository(session),
                    resource_repository=SQLAlchemyResourceRepository(session),
                    policy_provider=policy_manager,
                    locks=resource_locks,
                )
                await service.complete_ended_bookings()
        except SQLAlchemyError as e:
            logger.error(f"Booking completion job failed: {e}")

    scheduler = BookingCompletionScheduler(interval_seconds=settings.booking_completion_interval)
    await scheduler.start(booking_completion_job)

    # Store services in app state for dependency injection
    app.state.settings = settings
    app.state.policy_manager = policy_manager
    app.state.resource_locks = resource_locks
    app.state.scheduler = scheduler

    logger.info("Campus Booking Service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Campus Booking Service")

    await scheduler.stop()
    policy_manager.stop_watching()
    await close_database()

    logger.info("Campus Booking Service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Campus Booking API",
    description="""
    ## Campus Resource Booking

    Book rooms, halls, labs and equipment without double-booking.

    ---

    ### Authentication
    - `POST /api/auth/signup` - Register and receive a bearer token
    - `POST /api/auth/login` - Exchange credentials for a bearer token

    Every other `/api` endpoint needs `Authorization: Bearer <token>`.

    ### Resources
    - CRUD under `/api/resources/`, plus `search/`, `filter/` and `sort/`
    - `PUT /api/resources/{id}/cancel` cancels the resource and its upcoming bookings
    - `GET /api/resources/{id}/availability/?date=` shows booked and free windows

    ### Bookings
    - `POST /api/bookings/` reserves a slot; overlapping slots are refused with 409
    - Bookings move booked -> cancelled or booked -> completed
    - Ended bookings are completed automatically in the background

    ### Analytics
    - `GET /api/analytics/usage/` and `GET /api/analytics/top-rooms/`
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(accounts_router)
app.include_router(resources_router)
app.include_router(availability_router)
app.include_router(bookings_router)
app.include_router(users_router)
app.include_router(analytics_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "database": "connected",
                        "booking_policy": "booking_policy.yaml",
                        "policy_watcher": "watching",
                        "completion_scheduler": "running"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Reports database connectivity, where the booking policy came from and
    the background scheduler state. A failed database check marks the
    service as degraded.
    """
    try:
        await check_database()
        database = "connected"
    except (SQLAlchemyError, OSError, RuntimeError) as e:
        logger.warning(f"Health check database failure: {e}")
        database = "unavailable"

    policy_manager = getattr(request.app.state, "policy_manager", None)
    scheduler = getattr(request.app.state, "scheduler", None)

    checks = {
        "database": database,
        "booking_policy": policy_manager.source if policy_manager else "not_loaded",
        "policy_watcher": "watching" if policy_manager and policy_manager.is_watching else "static",
        "completion_scheduler": "running" if scheduler and scheduler.is_running else "stopped",
    }

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Campus Booking Service",
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "accounts": {"prefix": "/api/auth"},
            "resources": {"prefix": "/api/resources"},
            "bookings": {"prefix": "/api/bookings"},
            "analytics": {"prefix": "/api/analytics"},
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "campus_booking.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
