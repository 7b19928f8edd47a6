# garage/routers/forecast.py
"""Weather forecast proxy: public, no session required."""

from fastapi import APIRouter

from garage.services.forecast_service import fetch_forecast

router = APIRouter()


@router.get("/previsao/{cidade}", summary="5-day forecast for a city (OpenWeatherMap passthrough)")
async def get_forecast(cidade: str):
    return await fetch_forecast(cidade)
