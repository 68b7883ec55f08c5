# main.py
"""
Gainsly API - Main Application.

FastAPI app backing the Gainsly workout tracker, stored in MongoDB.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from database import Database
from settings import settings
from gainsly.middleware.db_middleware import LazyDatabaseMiddleware
from gainsly.middleware.rate_limit import limiter
from gainsly.middleware.request_logging import RequestLoggingMiddleware
from gainsly.middleware.security_headers import SecurityHeadersMiddleware
from gainsly.routes import auth, user, exercise, workout
from gainsly.utils.handlers import register_exception_handlers

VERSION = "1.0.0"

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
)
logger = logging.getLogger("gainsly")


def init_sentry() -> bool:
    """Turn on Sentry when a DSN is configured. Errors logged at ERROR become events."""
    if not settings.SENTRY_DSN:
        logger.debug("SENTRY_DSN not set, error tracking off")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        release=f"gainsly-api@{VERSION}",
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
    )
    logger.info(f"Sentry enabled for {settings.SENTRY_ENVIRONMENT}")
    return True


init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Gainsly API {VERSION} starting ({settings.ENV})")
    connected = await Database.ensure_connected(settings.DATABASE_URL, settings.DATABASE_NAME)
    if not connected:
        logger.warning("Starting without MongoDB; requests will retry the connection")

    yield

    await Database.close_db()
    logger.info("Gainsly API stopped")


app = FastAPI(
    title="Gainsly API",
    version=VERSION,
    description="Workout tracking: exercises, workouts, sets and templates",
    lifespan=lifespan,
)

app.state.limiter = limiter
register_exception_handlers(app)

# Added last runs first: logging wraps everything, CORS answers preflights before auth
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LazyDatabaseMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
app.add_middleware(RequestLoggingMiddleware)


def _service_info() -> dict:
    return {
        "environment": settings.ENV,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe. Never touches MongoDB."""
    return {"status": "ok", **_service_info()}


@app.get("/health/detailed", tags=["Health"])
async def health_check_detailed():
    """Readiness probe: pings MongoDB and reports ``degraded`` when it is down."""
    mongo_ok = await Database.ping()
    return {
        "status": "ok" if mongo_ok else "degraded",
        "database": {"engine": "mongodb", "name": settings.DATABASE_NAME, "connected": mongo_ok},
        **_service_info(),
    }


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(exercise.router, prefix="/exercises", tags=["Exercises"])
app.include_router(workout.router, prefix="/workouts", tags=["Workouts"])


@app.get("/")
async def root():
    return {"message": "Gainsly API", "version": VERSION, "docs": "/docs", "health": "/health"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
