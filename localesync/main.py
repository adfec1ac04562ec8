"""
FastAPI application entry point
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import logging
import time

from localesync import __version__
from localesync.core.config import settings
from localesync.core.database import engine, Base
from localesync.core.logging_config import setup_logging
from localesync.core.health import get_health_status

# Import models so their tables are registered
from localesync.models import translation  # noqa: F401

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Translation lifecycle engine for translatable models",
    version=__version__,
)


@app.on_event("startup")
async def startup():
    """Initialize database on startup"""
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Translator backend: {settings.TRANSLATOR_BACKEND}, queue backend: {settings.TASK_QUEUE_BACKEND}")
    
    # Create tables if they don't exist
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables created/verified")
    except Exception as e:
        logger.error(f"❌ Error creating database tables: {e}")
    
    health = get_health_status()
    if health["status"] == "healthy":
        logger.info("All systems healthy")
    else:
        logger.warning(f"Health check issues: {health}")


@app.on_event("shutdown")
async def shutdown():
    """Cleanup on shutdown"""
    logger.info(f"Shutting down {settings.APP_NAME}...")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
def health():
    """
    Health check endpoint.
    Returns status of all components; degraded still serves traffic.
    """
    health_status = get_health_status()
    
    if health_status["status"] != "unhealthy":
        return JSONResponse(content=health_status, status_code=status.HTTP_200_OK)
    return JSONResponse(content=health_status, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


@app.get("/health/live")
async def liveness():
    """Liveness probe - 200 if application is alive"""
    return {"status": "alive"}


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests"""
    start_time = time.time()
    
    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"{request.method} {request.url.path} - "
            f"Error: {str(e)} - "
            f"Time: {process_time:.3f}s",
            exc_info=True
        )
        raise
    
    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.3f}s"
    )
    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


# Include routers
from localesync.api.v1 import translations

app.include_router(translations.router, prefix="/api/v1/translations", tags=["translations"])
