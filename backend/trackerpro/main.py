from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from trackerpro.core.config import settings
from trackerpro.core.database import init_db, close_db, AsyncSessionLocal
from trackerpro.core.exceptions import TrackerProError, error_response
from trackerpro.core.logging_config import logger
from trackerpro.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from trackerpro.core.rate_limiter import limiter, rate_limit_exceeded_handler
from trackerpro.api.v1.router import api_router
from trackerpro.db.seed_data import build_service, seed_accounts

DEFAULT_SECRETS = {"", "CHANGE_ME", "change-me", "secret"}


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if settings.JWT_SECRET_KEY in DEFAULT_SECRETS:
        if settings.is_production:
            errors.append("JWT_SECRET_KEY is not set or using default value")
        else:
            warnings.append("JWT_SECRET_KEY is using a default value")

    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        errors.append("ADMIN_EMAIL / ADMIN_PASSWORD are not set")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


async def seed_initial_data():
    """Create the bootstrap admin (and sample users when enabled)"""
    async with AsyncSessionLocal() as session:
        await seed_accounts(build_service(session))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    await validate_critical_config()
    await init_db()
    await seed_initial_data()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="User accounts, approval workflow and admin dashboard for TrackerPro",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(TrackerProError)
async def trackerpro_exception_handler(request: Request, exc: TrackerProError):
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    message = errors[0]["message"] if len(errors) == 1 else "Validation failed"
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message, "errors": errors}
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=503,
        content={"success": False, "message": "Database error. Please try again later."}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": "1.0.0",
        "docs": "/docs",
        "api": settings.API_PREFIX
    }


app.include_router(api_router, prefix=settings.API_PREFIX)


def run():
    """Console entry point: serve the app with uvicorn"""
    import uvicorn

    uvicorn.run(
        "trackerpro.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG and not settings.is_production,
    )


if __name__ == "__main__":
    run()
