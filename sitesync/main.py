# sitesync/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from sitesync.routers import analytics, checkins, health, logbook, members, sites, subscription
from sitesync.database import create_tables
from sitesync.config import settings
from sitesync.services.errors import LogbookError
from sitesync.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="SiteSync Logbook API",
    description="Site check-in / check-out logbook with analytics and plan usage.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow dashboard / mobile web app to call the API) ─────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional shared API key in front of every endpoint except health and docs.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    OPEN_PATHS = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.OPEN_PATHS or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
@app.exception_handler(LogbookError)
async def logbook_error_handler(request: Request, exc: LogbookError):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.kind} — {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(checkins.router,     prefix="/api/v1", tags=["📍 Check-in / Check-out"])
app.include_router(logbook.router,      prefix="/api/v1", tags=["📒 Logbook"])
app.include_router(sites.router,        prefix="/api/v1", tags=["🏢 Sites"])
app.include_router(analytics.router,    prefix="/api/v1", tags=["📊 Analytics"])
app.include_router(members.router,      prefix="/api/v1", tags=["👥 Team Access"])
app.include_router(subscription.router, prefix="/api/v1", tags=["💳 Billing"])
app.include_router(health.router,       prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 SiteSync backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 SiteSync backend shutting down...")
