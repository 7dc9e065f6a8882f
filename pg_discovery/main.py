"""PG Discovery — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from pg_discovery.api.routes.auth import router as auth_router
from pg_discovery.api.routes.discovery import router as discovery_router
from pg_discovery.api.routes.enquiries import pg_router as pg_enquiries_router
from pg_discovery.api.routes.enquiries import router as enquiries_router
from pg_discovery.api.routes.guests import router as guests_router
from pg_discovery.api.routes.properties import router as properties_router
from pg_discovery.api.routes.rooms import router as rooms_router
from pg_discovery.api.routes.safety import router as safety_router
from pg_discovery.api.routes.uploads import router as uploads_router
from pg_discovery.api.routes.users import router as users_router
from pg_discovery.api.routes.validation import router as validation_router
from pg_discovery.config import settings

# Configure root logger so all pg_discovery.* loggers output to stderr (captured by Docker).
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Please check your input and try again"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting %s %s (%s)", settings.app_name, settings.app_version, settings.environment)
    yield
    # Shutdown: dispose engine connections
    from pg_discovery.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Listing, discovery and management backend for paying-guest accommodation.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Middleware is added in reverse execution order (last added runs first on request).
# SessionMiddleware is added BEFORE CORS so that CORS headers are always present.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SessionMiddleware, secret_key=settings.jwt_secret_key)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Every error body is ``{"success": false, "message", "code"?}``."""
    content: dict = {"success": False}
    if isinstance(exc.detail, dict):
        content.update(exc.detail)
    else:
        content["message"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Field errors grouped by field name, returned as 400."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "non_field"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": VALIDATION_MESSAGE, "errors": errors},
    )


# Public discovery routes go before the owner console so that
# /api/pgs/featured and friends are not captured by /api/pgs/{pg_id}.
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(discovery_router)
app.include_router(properties_router)
app.include_router(rooms_router)
app.include_router(validation_router)
app.include_router(enquiries_router)
app.include_router(pg_enquiries_router)
app.include_router(guests_router)
app.include_router(safety_router)
app.include_router(uploads_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
