"""Tests for the weather data model."""

import pytest

from weatherai.models import (
    CurrentWeather,
    HourlyForecast,
    WeatherDataError,
    WeatherSnapshot,
    WeatherSource,
    WeeklyForecast,
    encode_coordinates,
    is_coordinate_query,
)


class TestSnapshotFromDict:
    """Test mapping the backend JSON onto dataclasses."""

    def test_maps_camel_case_fields(self, weather_payload):
        snapshot = WeatherSnapshot.from_dict(weather_payload)

        assert snapshot.location_name == "서울"
        assert snapshot.current == CurrentWeather(
            temp=18.4,
            condition="PartlyCloudy",
            humidity=55,
            wind_speed=3.2,
            description="구름 조금",
        )
        assert snapshot.hourly[0] == HourlyForecast(time="00:00", temp=14, condition="Sunny")
        assert snapshot.weekly[0] == WeeklyForecast(
            day="월", max_temp=21, min_temp=11, condition="Cloudy"
        )
        assert snapshot.sources == []

    def test_preserves_forecast_order(self, weather_payload):
        snapshot = WeatherSnapshot.from_dict(weather_payload)
        assert [h.time for h in snapshot.hourly][:3] == ["00:00", "01:00", "02:00"]
        assert [w.day for w in snapshot.weekly] == ["월", "화", "수", "목", "금", "토", "일"]

    def test_missing_leaf_values_default(self):
        snapshot = WeatherSnapshot.from_dict({"current": {"condition": "Rainy"}})

        assert snapshot.location_name == ""
        assert snapshot.current.temp == 0
        assert snapshot.current.description == ""
        assert snapshot.hourly == []
        assert snapshot.weekly == []

    def test_numeric_strings_are_accepted(self):
        snapshot = WeatherSnapshot.from_dict({"current": {"temp": "21.5"}})
        assert snapshot.current.temp == 21.5

    def test_non_object_root_raises(self):
        with pytest.raises(WeatherDataError):
            WeatherSnapshot.from_dict(["not", "an", "object"])

    def test_missing_current_raises(self):
        with pytest.raises(WeatherDataError):
            WeatherSnapshot.from_dict({"locationName": "부산", "hourly": []})

    def test_malformed_hourly_entry_raises(self):
        with pytest.raises(WeatherDataError):
            WeatherSnapshot.from_dict({"current": {}, "hourly": ["12:00"]})

    def test_non_numeric_temperature_raises(self):
        with pytest.raises(WeatherDataError):
            WeatherSnapshot.from_dict({"current": {"temp": "warm"}})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "nan", "Infinity"])
    def test_non_finite_temperature_raises(self, value):
        with pytest.raises(WeatherDataError):
            WeatherSnapshot.from_dict({"current": {"temp": value}})

    def test_non_finite_forecast_value_raises(self):
        with pytest.raises(WeatherDataError):
            WeatherSnapshot.from_dict(
                {"current": {}, "weekly": [{"day": "월", "maxTemp": float("inf")}]}
            )

    def test_with_sources_returns_copy(self, weather_payload):
        snapshot = WeatherSnapshot.from_dict(weather_payload)
        sources = [WeatherSource(title="기상청", uri="https://www.weather.go.kr")]

        result = snapshot.with_sources(sources)

        assert result.sources == sources
        assert snapshot.sources == []
        assert result.current == snapshot.current


class TestCoordinateQueries:
    """Test encoding of device positions as queries."""

    def test_encodes_latitude_and_longitude(self):
        assert encode_coordinates(37.5665, 126.978) == "latitude: 37.5665, longitude: 126.978"

    def test_encoded_query_is_detected(self):
        assert is_coordinate_query(encode_coordinates(35.1796, 129.0756))

    def test_place_name_is_not_coordinate(self):
        assert not is_coordinate_query("부산 해운대구")
