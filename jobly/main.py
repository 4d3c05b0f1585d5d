"""
Jobly API - FastAPI application

1. Middleware order: CORS → CorrelationId → Logging
2. Storage handle opened in the lifespan, injected per request through get_db
3. Every error leaves as { "success": false, "errors": [...] }
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Union

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobly.core.config import settings
from jobly.core.exceptions import AppException, ServiceUnavailableError
from jobly.core.limiter import limiter
from jobly.core.logging import setup_logging
from jobly.core.middleware import CorrelationIdMiddleware, LoggingMiddleware
from jobly.database import Database
from jobly.routers.api_router import api_router

# ============================================================================
# LOGGING SETUP
# ============================================================================
setup_logging()
logger = logging.getLogger(__name__)


# ============================================================================
# LIFESPAN MANAGEMENT
# ============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.
    - Startup: open the storage handle and make sure the schema exists
    - Shutdown: dispose of the connection pool
    """
    logger.info(f"Starting {settings.app_name} v{settings.version} ({settings.environment})")

    database = Database(settings.database_url)
    try:
        database.create_all()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        database.dispose()
        raise

    app.state.database = database
    yield

    logger.info("Gracefully shutting down...")
    database.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Jobly - job board API for companies, jobs and the users applying to them",
    lifespan=lifespan,
)

# ============================================================================
# RATE LIMITER
# ============================================================================
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ============================================================================
# MIDDLEWARE STACK (last added = first to execute)
# ============================================================================
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[settings.request_id_header, "X-Process-Time"],
)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================
def _error_response(status_code: int, errors: list) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "errors": errors})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and query strings are rejected as 400 Bad Request."""
    errors = []
    for error in exc.errors():
        # loc is usually ('body', 'field_name') or ('query', 'minSalary')
        field = ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0])
        errors.append({
            "field": field,
            "msg": f"{field}: {error['msg']}",
            "code": "BAD_REQUEST",
        })

    logger.warning(f"Validation Error: {errors}")
    return _error_response(status.HTTP_400_BAD_REQUEST, errors)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Handle domain-specific application exceptions."""
    logger.warning(f"AppException: {exc.message}", extra={"code": exc.error_code})
    return _error_response(
        exc.status_code,
        [{"msg": message, "code": exc.error_code} for message in exc.messages],
    )


@app.exception_handler(OperationalError)
async def storage_unavailable_handler(request: Request, exc: OperationalError):
    """Timeouts and lost connections are surfaced as a retryable 503."""
    logger.error(f"Storage error: {exc}", extra={"path": request.url.path})
    return await app_exception_handler(request, ServiceUnavailableError())


@app.exception_handler(StarletteHTTPException)
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: Union[HTTPException, StarletteHTTPException]):
    """Handle standard HTTP exceptions."""
    return _error_response(
        exc.status_code,
        [{"msg": exc.detail if isinstance(exc.detail, str) else "Request failed"}],
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Fallback handler for unhandled server errors."""
    logger.exception("Unhandled server error", extra={"path": request.url.path})
    return _error_response(500, [{"msg": "An unexpected server error occurred."}])


# ============================================================================
# ROUTER INCLUSION
# ============================================================================
app.include_router(api_router)


# ============================================================================
# OPERATIONAL ENDPOINTS
# ============================================================================
@app.get("/", tags=["Health"])
def root():
    """API root endpoint."""
    return {
        "message": "Jobly API",
        "version": settings.version,
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Liveness probe for load balancers and orchestrators."""
    return {
        "status": "up",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.version,
        "environment": settings.environment,
    }


@app.get("/readiness", tags=["Health"])
def readiness_check(request: Request):
    """Readiness probe - verifies database connectivity."""
    try:
        with request.app.state.database.session() as session:
            session.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "components": {"database": "connected"},
        }
    except OperationalError as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Service not ready")
