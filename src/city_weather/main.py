"""Main FastAPI application for the city weather service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import os

import redis.asyncio as redis
import uvicorn
import traceback
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from fastapi_cache import FastAPICache
from fastapi_cache.backends.redis import RedisBackend

from city_weather.api.endpoints import router as weather_router
from city_weather.config import (
    HOST, PORT, DEBUG, REDIS_URL, CACHE_PREFIX,
    OPENWEATHER_API_KEY, RATE_LIMIT_ENABLED, RATE_LIMIT_REQUESTS_PER_SECOND
)
from city_weather.logging_config import configure_logging
from city_weather.middleware.rate_limit import RateLimitMiddleware
from city_weather.rate_limiter import RateLimiter

configure_logging(debug=DEBUG)
logger = logging.getLogger(__name__)

STATIC_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    The Redis client on ``app.state.redis`` is shared by the response cache
    and the rate limiter, and is closed on shutdown.
    """
    redis_client = app.state.redis
    try:
        if not OPENWEATHER_API_KEY:
            logger.warning("OPENWEATHER_API_KEY is not set; upstream requests will be rejected")

        FastAPICache.init(RedisBackend(redis_client), prefix=CACHE_PREFIX)
        logger.info("Cache initialized with Redis backend")

        logger.info("Starting City Weather Service")
        yield
    except Exception as e:
        logger.error(f"Startup error: {e}")
        logger.error(traceback.format_exc())
        raise
    finally:
        logger.info("Shutting down City Weather Service")
        try:
            await redis_client.aclose()
        except Exception as e:
            logger.error(f"Shutdown error: {e}")


def create_app(
    redis_client: Optional[redis.Redis] = None,
    rate_limit_enabled: bool = RATE_LIMIT_ENABLED
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        redis_client: Redis client for cache and rate limiting (created from
            REDIS_URL if None)
        rate_limit_enabled: Whether the rate limit middleware applies limits

    Returns:
        Configured FastAPI application instance
    """
    if redis_client is None:
        logger.info(f"Using Redis at {REDIS_URL}")
        redis_client = redis.from_url(REDIS_URL)

    app = FastAPI(
        title="City Weather Service",
        description="REST API service that geocodes a city and returns current weather and a 3 day forecast from OpenWeatherMap",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.redis = redis_client

    app.add_middleware(
        RateLimitMiddleware,
        enabled=rate_limit_enabled,
        rate_limiter=RateLimiter(redis_client=redis_client, max_requests=RATE_LIMIT_REQUESTS_PER_SECOND)
    )

    app.include_router(weather_router)

    app.mount("/static", StaticFiles(directory=STATIC_PATH), name="static")

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint serving the web interface."""
        return FileResponse(os.path.join(STATIC_PATH, "index.html"))

    @app.get("/api", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "City Weather Service",
            "docs": "/docs",
            "redoc": "/redoc",
            "weather": "/api/weather?city={city}&units={units}",
            "health": "/api/weather/health",
            "info": "/api/weather/info"
        }

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        "city_weather.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
