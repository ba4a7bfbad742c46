"""
FastAPI application entry point for the Job Board API.

This is the main app that:
- Initializes FastAPI with CORS
- Registers error handlers and all API routers
- Provides health check endpoint
- Sets up database connection lifecycle
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobboard import database
from jobboard.config import settings
from jobboard.errors import register_exception_handlers
# Import API routers
from jobboard.api import users, jobs, applications
# Register models on Base.metadata
from jobboard import models  # noqa: F401

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Job Board API"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    On startup: warn about development secrets, optionally create tables
    On shutdown: Close database connections gracefully
    """
    # Startup
    logger.info(f"🚀 Starting {SERVICE_NAME}...")
    logger.info(f"📊 Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"🔧 Debug mode: {settings.debug}")

    if settings.uses_dev_secrets():
        logger.warning("⚠️ JWT secrets are the built-in development values; set JWT_SECRET and JWT_REFRESH_SECRET")

    if settings.auto_create_tables:
        async with database.engine.begin() as conn:
            await conn.run_sync(database.Base.metadata.create_all)
        logger.info("Database tables created")

    yield

    # Shutdown
    logger.info(f"👋 Shutting down {SERVICE_NAME}...")
    await database.engine.dispose()


# Initialize FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Job board backend: accounts, job postings and applications",
    version=VERSION,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:3000",  # Local development
]

if settings.allowed_origins:
    allowed_origins.extend(origin.strip() for origin in settings.allowed_origins.split(',') if origin.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
    }


# Root endpoint
@app.get("/")
async def root():
    """API root with basic info."""
    return {
        "message": SERVICE_NAME,
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
