"""API endpoints for the weather webhook service."""

import logging
import traceback
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Request

from weather_webhook.api.models import WebhookRequest, WebhookResponse
from weather_webhook.config import WeatherSettings
from weather_webhook.intents.dispatcher import IntentDispatcher
from weather_webhook.intents.messages import GENERIC_ERROR_TEXT
from weather_webhook.weather.errors import ErrorCode
from weather_webhook.weather.service import WeatherService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["webhook"])


def get_settings(request: Request) -> WeatherSettings:
    """Dependency returning the settings built at startup."""
    return request.app.state.settings


async def get_weather_service(
    settings: WeatherSettings = Depends(get_settings)
) -> AsyncGenerator[WeatherService, None]:
    """Dependency yielding a weather service, closed once the request is done."""
    async with WeatherService(settings) as service:
        yield service


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    response_model_exclude_none=True
)
async def webhook(
    body: WebhookRequest,
    settings: WeatherSettings = Depends(get_settings),
    weather_service: WeatherService = Depends(get_weather_service)
) -> WebhookResponse:
    """Dialogflow fulfillment endpoint.

    Always answers with HTTP 200; failures are explained in the fulfillment
    text and tagged with an error code in the payload.

    Args:
        body: Dialogflow webhook request

    Returns:
        WebhookResponse with the reply text
    """
    logger.info(f"Received webhook request: {body.model_dump_json(by_alias=True)}")
    query = body.query_result

    try:
        dispatcher = IntentDispatcher(weather_service, settings)
        response = await dispatcher.dispatch(query.intent.display_name, query.parameters)

    except Exception as e:
        logger.error(f"Error processing webhook: {e}")
        logger.error(traceback.format_exc())
        response = WebhookResponse.from_error(
            GENERIC_ERROR_TEXT.format(message=e),
            ErrorCode.INTERNAL_ERROR.value
        )

    logger.info(f"Sending response: {response.model_dump_json(by_alias=True, exclude_none=True)}")
    return response


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "weather-webhook"}
