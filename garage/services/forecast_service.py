# garage/services/forecast_service.py
"""
Weather forecast proxy.
Forwards a city lookup to OpenWeatherMap using the server-held API key and
returns the upstream JSON unchanged. Upstream errors keep their status code.
"""

import httpx

from garage.config import settings
from garage.errors import GarageError, UpstreamError
from garage.utils.logger import get_logger

logger = get_logger(__name__)


def _upstream_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


async def fetch_forecast(city: str) -> dict:
    api_key = settings.OPENWEATHER_API_KEY
    if not api_key:
        logger.error("[FORECAST] OPENWEATHER_API_KEY is not set, cannot fetch forecasts")
        raise GarageError()

    params = {"q": city, "appid": api_key, "units": "metric", "lang": "pt_br"}
    logger.info(f"[FORECAST] Fetching forecast for '{city}'")
    try:
        async with httpx.AsyncClient(timeout=settings.FORECAST_TIMEOUT_SECONDS) as client:
            response = await client.get(settings.OPENWEATHER_URL, params=params)
    except httpx.HTTPError as e:
        logger.error(f"[FORECAST] Weather API unreachable for '{city}': {e}")
        raise UpstreamError("Could not connect to the weather service")

    if response.status_code != 200:
        message = _upstream_message(response)
        logger.warning(f"[FORECAST] Failed for '{city}': {response.status_code} - {message}")
        raise UpstreamError(f"Failed to fetch forecast: {message}", status_code=response.status_code)

    return response.json()
