from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.api.v1.router import api_v1_router
from app.core.config import get_settings
from app.core.http import create_http_client, set_http_client
from app.core.log import configure_logging
from app.services.weather.session import WeatherSession


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    if not settings.openweathermap_api_key:
        logger.warning("SKYCAST_OPENWEATHERMAP_API_KEY is not set; weather requests will fail")

    # Setup HTTP client
    client = create_http_client(settings)
    set_http_client(client)

    try:
        yield
    finally:
        set_http_client(None)
        await client.aclose()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    # Setup rate limiter
    limiter = Limiter(key_func=get_remote_address, default_limits=["120/minute"])

    app = FastAPI(
        title="skycast api",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # One view state per process: the app serves a single user.
    app.state.session = WeatherSession(
        day_timezone=settings.day_timezone,
        summary_days=settings.summary_days,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_v1_router, prefix="/api/v1")
    return app


app = create_app()
