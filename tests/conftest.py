"""Shared test fixtures for AI weather responses."""

import json

import pytest

from weatherai.config import Settings


@pytest.fixture()
def settings():
    return Settings(api_key="sk-test", model="claude-sonnet-4-20250514")


@pytest.fixture()
def weather_payload():
    """Sample weather JSON for Seoul, as the model is asked to return it."""
    return {
        "locationName": "서울",
        "current": {
            "temp": 18.4,
            "condition": "PartlyCloudy",
            "humidity": 55,
            "windSpeed": 3.2,
            "description": "구름 조금",
        },
        "hourly": [
            {"time": f"{h:02d}:00", "temp": 14 + (h % 8), "condition": "Sunny"}
            for h in range(24)
        ],
        "weekly": [
            {"day": day, "maxTemp": 21 + i, "minTemp": 11 + i, "condition": "Cloudy"}
            for i, day in enumerate(["월", "화", "수", "목", "금", "토", "일"])
        ],
    }


@pytest.fixture()
def weather_json(weather_payload):
    return json.dumps(weather_payload, ensure_ascii=False)
