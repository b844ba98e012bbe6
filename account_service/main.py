"""
FastAPI application entry point for the account service.
"""
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog
import uvicorn

from .api.users import router as users_router
from .container.container import Container
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import ErrorHandlingMiddleware, RequestTrackingMiddleware
from .interfaces.repository_interface import IUserRepository

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare storage on startup and release it on shutdown."""
    container: Container = app.state.container
    logger.info(
        "Starting account service",
        version=container.settings.VERSION,
        environment=container.settings.ENVIRONMENT
    )
    await container.startup()
    try:
        yield
    finally:
        logger.info("Shutting down account service")
        await container.shutdown()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed bodies without echoing their content."""
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
    logger.warning("Validation error", fields=fields)
    
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation error",
            "fields": fields,
            "error_code": "INVALID"
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": getattr(exc, "error_code", f"HTTP_{exc.status_code}")
        },
        headers=getattr(exc, "headers", None)
    )


def create_app(
    settings: Optional[Settings] = None,
    user_repository: Optional[IUserRepository] = None
) -> FastAPI:
    """
    Build the application.
    
    Args:
        settings: Configuration; read from the environment when omitted
        user_repository: Store to use instead of the SQL repository
    """
    settings = settings or get_settings()
    configure_logging(settings.DEBUG)
    
    app = FastAPI(
        title=settings.APP_NAME,
        description="User accounts: registration, tokens, and profile management",
        version=settings.VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.container = Container(settings, user_repository=user_repository)
    
    # Error handling runs inside request tracking so failures keep their request id
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestTrackingMiddleware)
    
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    
    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", "service": settings.APP_NAME, "version": settings.VERSION}
    
    @app.get("/ready", tags=["health"])
    async def readiness_check():
        store_ready = await app.state.container.user_repository.ping()
        body = {
            "status": "ready" if store_ready else "not_ready",
            "checks": {"user_store": store_ready},
            "service": settings.APP_NAME,
            "version": settings.VERSION
        }
        if not store_ready:
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
        return body
    
    app.include_router(users_router, prefix=settings.API_PREFIX)
    
    return app


def run() -> None:
    """Run the server with settings from the environment."""
    settings = get_settings()
    uvicorn.run(
        "account_service.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        access_log=False  # Use structured logging instead
    )


if __name__ == "__main__":
    run()
