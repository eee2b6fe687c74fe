"""Tests for the config module."""

import dataclasses
import importlib
import logging
from unittest.mock import patch

import pytest

from weatherai import config


class TestConfigDefaults:
    """Verify default values when no environment variables are set."""

    def test_anthropic_model_default(self):
        assert config.ANTHROPIC_MODEL == "claude-sonnet-4-20250514"

    def test_weather_max_tokens_default(self):
        assert config.WEATHER_MAX_TOKENS == 4096

    def test_web_search_max_uses_default(self):
        assert config.WEB_SEARCH_MAX_USES == 5

    def test_default_city(self):
        assert config.DEFAULT_CITY == "서울"

    def test_suggest_debounce_default(self):
        assert config.SUGGEST_DEBOUNCE_MS == 500

    def test_geolocation_url_default(self):
        assert config.GEOLOCATION_URL == "https://ipapi.co/json/"


class TestConfigEnvOverrides:
    """Verify environment variables override defaults."""

    @patch.dict("os.environ", {"ANTHROPIC_MODEL": "claude-haiku-4-5-20251001"})
    def test_anthropic_model_override(self):
        importlib.reload(config)
        assert config.ANTHROPIC_MODEL == "claude-haiku-4-5-20251001"
        importlib.reload(config)

    @patch.dict("os.environ", {"WEB_SEARCH_MAX_USES": "2"})
    def test_web_search_max_uses_override(self):
        importlib.reload(config)
        assert config.WEB_SEARCH_MAX_USES == 2
        importlib.reload(config)

    @patch.dict("os.environ", {"SUGGEST_DEBOUNCE_MS": "250"})
    def test_suggest_debounce_override(self):
        importlib.reload(config)
        assert config.SUGGEST_DEBOUNCE_MS == 250
        assert isinstance(config.SUGGEST_DEBOUNCE_MS, int)
        importlib.reload(config)

    @patch.dict("os.environ", {"GEOLOCATION_URL": ""})
    def test_geolocation_can_be_disabled(self):
        importlib.reload(config)
        assert config.GEOLOCATION_URL == ""
        importlib.reload(config)


class TestSettings:
    """Verify the settings object handed to the query service."""

    @patch.dict("os.environ", {"ANTHROPIC_API_KEY": "sk-test-key-123"})
    def test_from_env_reads_api_key(self):
        settings = config.Settings.from_env()
        assert settings.api_key == "sk-test-key-123"
        assert settings.model == config.ANTHROPIC_MODEL

    def test_settings_are_immutable(self):
        settings = config.Settings(api_key="sk-test")
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.api_key = "other"


class TestConfigureLogging:
    """Verify the log level is applied."""

    def test_level_is_passed_to_basic_config(self):
        with patch("weatherai.config.logging.basicConfig") as basic_config:
            config.configure_logging("debug")
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        with patch("weatherai.config.logging.basicConfig") as basic_config:
            config.configure_logging("chatty")
        assert basic_config.call_args.kwargs["level"] == logging.INFO


class TestGeolocationTimeout:
    """Verify the locate button timeout setting."""

    def test_default_is_five_seconds(self):
        assert config.GEOLOCATION_TIMEOUT == 5

    @patch.dict("os.environ", {"GEOLOCATION_TIMEOUT": "10"})
    def test_override(self):
        importlib.reload(config)
        assert config.GEOLOCATION_TIMEOUT == 10
        importlib.reload(config)


class TestGeolocationProvider:
    """Verify the position provider setting."""

    def test_browser_is_default(self):
        assert config.GEOLOCATION_PROVIDER == "browser"

    @patch.dict("os.environ", {"GEOLOCATION_PROVIDER": "ip"})
    def test_override(self):
        importlib.reload(config)
        assert config.GEOLOCATION_PROVIDER == "ip"
        importlib.reload(config)
