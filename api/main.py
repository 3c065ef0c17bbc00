"""
FastAPI main application for the WeatherWell Comfort API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import load_api_config
from api.dependencies import get_weather_service
from api.routes import auth, health, weather
from api.services.refresh_scheduler import RefreshScheduler
from weatherwell.utils.logger import get_logger

api_config = load_api_config()
logger = get_logger("weatherwell", api_config["logging"])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting up API...")

    scheduler = None
    scheduler_config = api_config["scheduler"]
    if scheduler_config.get("enabled", False):
        weather_service = get_weather_service()
        scheduler = RefreshScheduler(
            weather_service,
            interval_seconds=scheduler_config.get("interval_seconds", weather_service.cache_ttl_seconds),
            logger=logger,
        )
        await scheduler.start()

    yield

    if scheduler is not None:
        await scheduler.stop()

    logger.info("👋 Shutting down API...")


# Create FastAPI application
app = FastAPI(
    title=api_config["api"].get("title", "WeatherWell Comfort API"),
    version=api_config["api"].get("version", "1.0.0"),
    description=api_config["api"].get("description", ""),
    lifespan=lifespan,
)

# Configure CORS
cors_config = api_config["api"]["cors"]
if cors_config.get("enabled", False):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.get("origins", []),
        allow_credentials=cors_config.get("allow_credentials", True),
        allow_methods=cors_config.get("allow_methods", ["*"]),
        allow_headers=cors_config.get("allow_headers", ["*"]),
    )

# Include routers
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(weather.router, prefix="/api", tags=["Weather"])
app.include_router(auth.router, prefix="/api", tags=["Auth"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": app.title,
        "version": app.version,
        "description": app.description,
        "docs": "/docs",
        "health": "/api/health"
    }
