"""FastAPI application entry point."""

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import health, recipes
from app.config import settings
from app.core.request_id import get_request_id
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import get_rate_limit_exceeded_handler, limiter
from app.middleware.security import SecurityHeadersMiddleware, setup_cors
from app.utils.exceptions import (
    GenerationError,
    NotFoundError,
    PersistenceError,
    RecetasException,
    ValidationError,
)
from app.utils.logging_config import setup_logging

# Setup logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Recetas API",
    description="Recipe generation from ingredients using Gemini, stored in Firestore",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add rate limiter to app
app.state.limiter = limiter

# Add exception handler for rate limiting
app.add_exception_handler(RateLimitExceeded, get_rate_limit_exceeded_handler())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body/query schema errors with detailed messages."""
    request_id = get_request_id()

    logger.warning(
        f"Validation error: {str(exc)}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "detail": exc.errors(),
            "request_id": request_id,
        },
    )


@app.exception_handler(RecetasException)
async def recetas_exception_handler(request: Request, exc: RecetasException) -> JSONResponse:
    """Translate service exceptions into caller-facing responses."""
    request_id = get_request_id()
    # Caller-correctable errors always carry their message
    show_detail = settings.expose_error_details

    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_message = "Validation error"
        show_detail = True
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        error_message = "Recipe not found"
        show_detail = True
    elif isinstance(exc, GenerationError):
        status_code = status.HTTP_502_BAD_GATEWAY
        error_message = "Failed to generate recipe"
    elif isinstance(exc, PersistenceError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        if request.method == "GET":
            error_message = "Failed to load recipes"
        else:
            error_message = "Failed to save recipe"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_message = "Internal server error"

    if status_code >= 500:
        logger.error(
            f"Exception: {error_message}",
            extra={"request_id": request_id, "exception": str(exc)},
            exc_info=True,
        )
    else:
        logger.warning(
            f"Exception: {error_message}",
            extra={"request_id": request_id, "exception": str(exc)},
        )

    content = {"error": error_message, "request_id": request_id}
    if show_detail:
        content["detail"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and other framework HTTP errors."""
    request_id = get_request_id()
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = {"error": "Endpoint not found", "request_id": request_id}
    else:
        content = {"error": exc.detail, "request_id": request_id}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = get_request_id()

    logger.error(
        f"Unexpected exception: {str(exc)}",
        extra={"request_id": request_id},
        exc_info=True,
    )

    content = {"error": "Internal server error", "request_id": request_id}
    if settings.expose_error_details:
        content["detail"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Add middleware (order matters!)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
setup_cors(app)

# Include routers
app.include_router(health.router)
app.include_router(recipes.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    logger.info("Recetas API starting up...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Recipe store: {settings.recipe_store}")
    logger.info(f"Rate limit: {settings.rate_limit}")
    logger.info(f"Allowed origins: {', '.join(settings.cors_origins_list)}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event."""
    logger.info("Recetas API shutting down...")


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
