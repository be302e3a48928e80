"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from webculus.config import settings
from webculus.api import (
    health_router,
    auth_router,
    users_router,
    lessons_router,
    practice_router,
    progress_router,
    dashboard_router,
)
from webculus.services.rate_limiter import require_api_rate_limit

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s  %(name)-25s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Webculus backend starting (env=%s)", settings.ENV)
    logger.info("CORS enabled for: %s", ", ".join(settings.cors_origins))
    yield
    logger.info("Webculus backend shut down")


app = FastAPI(
    title="Webculus API",
    description="Lessons, practice and progress tracking for two-variable equations and calculus",
    version=API_VERSION,
    lifespan=lifespan,
)

# ── Middleware ─────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and timing."""
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s - %s - %.3fs",
        request.method,
        request.url.path,
        response.status_code,
        time.perf_counter() - started,
    )
    return response


# ── Routers ───────────────────────────────────────────────────────────────────

_rate_limited = [Depends(require_api_rate_limit)]

app.include_router(health_router, tags=["Health"])
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"], dependencies=_rate_limited)
app.include_router(users_router, prefix="/api", tags=["Users"], dependencies=_rate_limited)
app.include_router(lessons_router, prefix="/api/lessons", tags=["Lessons"], dependencies=_rate_limited)
app.include_router(practice_router, prefix="/api/practice", tags=["Practice"], dependencies=_rate_limited)
app.include_router(progress_router, prefix="/api/user/progress", tags=["Progress"], dependencies=_rate_limited)
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"], dependencies=_rate_limited)


@app.get("/")
async def root():
    return {
        "name": "Webculus API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "auth": "/api/auth/*",
            "lessons": "/api/lessons",
            "practice": "/api/practice/*",
            "user": "/api/user/*",
            "dashboard": "/api/dashboard/stats",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("webculus.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
