"""Main FastAPI application for the weather webhook service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from weather_webhook.api.endpoints import router as webhook_router
from weather_webhook.api.models import WebhookResponse
from weather_webhook.config import HOST, PORT, DEBUG, WeatherSettings
from weather_webhook.intents.messages import FALLBACK_TEXT
from weather_webhook.logging_config import configure_logging
from weather_webhook.weather.errors import ErrorCode

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting Weather Webhook Service")
    yield
    logger.info("Shutting down Weather Webhook Service")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Answer malformed webhook calls with a spoken fallback instead of a 422."""
    if request.url.path != "/webhook":
        return await request_validation_exception_handler(request, exc)

    logger.error(f"Invalid webhook request: {exc.errors()}")
    response = WebhookResponse.from_error(FALLBACK_TEXT, ErrorCode.INVALID_REQUEST.value)
    return JSONResponse(
        status_code=200,
        content=response.model_dump(by_alias=True, exclude_none=True)
    )


def create_app(settings: Optional[WeatherSettings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Service settings (read from the environment if None)

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Weather Webhook Service",
        description="Dialogflow fulfillment webhook answering weather questions with OpenWeatherMap data",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings or WeatherSettings.from_env()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include API routers
    app.include_router(webhook_router)

    @app.get("/", tags=["root"], response_class=PlainTextResponse)
    async def root() -> str:
        """Liveness endpoint."""
        return "Weather Webhook Service is running!"

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        "weather_webhook.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
