"""Main FastAPI Application

Wires middleware, global exception handlers and the API routers from
`presentation`.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `domain` and `infrastructure`;
this module only assembles the HTTP surface.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.database import init_db, close_db, health_check
from core.logging_config import configure_logging
from core.exceptions import (
    DomainException,
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    DuplicateResourceException,
    DependencyException,
    NotificationDeliveryException,
)
from presentation.api.v1.container import drain_notifications
from presentation.api.v1.dependencies import limiter
from presentation.api.v1.endpoints import (
    auth_router,
    jobs_router,
    user_router,
    employer_router,
    admin_router,
    saved_jobs_router,
)


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    await drain_notifications()
    await close_db()
    logger.info("Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Job board backend: postings, applications and employer approval",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


def _error_response(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def status_code_for(exc: DomainException) -> int:
    """HTTP status for a domain exception"""
    if isinstance(exc, AuthenticationException):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationException):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ResourceNotFoundException):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, DuplicateResourceException):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, DependencyException):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    # Validation and lifecycle rule violations
    return status.HTTP_400_BAD_REQUEST


# Global Exception Handlers
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Handle domain-level exceptions"""
    status_code = status_code_for(exc)

    if isinstance(exc, DependencyException):
        logger.error(f"Dependency failure on {request.method} {request.url.path}: {exc.message}")
        if not isinstance(exc, NotificationDeliveryException):
            return _error_response(status_code, "Server error")
    else:
        logger.warning(f"Domain exception on {request.method} {request.url.path}: {exc.message}")

    return _error_response(status_code, exc.message, getattr(exc, "errors", None))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else '?'}")
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests from this IP, please try again later.",
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


# Health check
@app.get("/health", tags=["Health"])
async def health():
    database_ok = await health_check()
    return {
        "success": database_ok,
        "status": "healthy" if database_ok else "degraded",
        "environment": settings.ENVIRONMENT,
    }


# Include API routes
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(jobs_router, prefix="/api/jobs", tags=["Jobs"])
app.include_router(user_router, prefix="/api/user", tags=["User"])
app.include_router(employer_router, prefix="/api/employer", tags=["Employer"])
app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(saved_jobs_router, prefix="/api/saved-jobs", tags=["Saved Jobs"])

# Uploaded resumes and licenses
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
