"""Centralized configuration loaded from environment variables.

All settings are read from environment variables with sensible defaults.
Also checks Streamlit secrets (st.secrets) for Streamlit Cloud deployments.
The query service takes an explicit Settings object built once at startup,
so tests can inject their own credentials.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def get_anthropic_api_key() -> str:
    """Get the Anthropic API key lazily so st.secrets is ready.

    Must be called at runtime (not import time) because Streamlit
    Cloud only makes st.secrets available after the app starts.
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and "ANTHROPIC_API_KEY" in st.secrets:
            return str(st.secrets["ANTHROPIC_API_KEY"])
    except Exception:
        pass
    return os.environ.get("ANTHROPIC_API_KEY", "")


def _get_int(key: str, default: int) -> int:
    """Read an integer environment variable with a default."""
    return int(os.environ.get(key, str(default)))


# Anthropic API: model and tokens from env vars, key is lazy via function
ANTHROPIC_MODEL: str = os.environ.get("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
WEATHER_MAX_TOKENS: int = _get_int("WEATHER_MAX_TOKENS", 4096)
SUGGEST_MAX_TOKENS: int = _get_int("SUGGEST_MAX_TOKENS", 512)
WEB_SEARCH_MAX_USES: int = _get_int("WEB_SEARCH_MAX_USES", 5)

# App behaviour
DEFAULT_CITY: str = os.environ.get("DEFAULT_CITY", "서울")
SUGGEST_DEBOUNCE_MS: int = _get_int("SUGGEST_DEBOUNCE_MS", 500)

# Geolocation: "browser" reads navigator.geolocation, "ip" looks up the
# server's public IP (local runs only)
GEOLOCATION_PROVIDER: str = os.environ.get("GEOLOCATION_PROVIDER", "browser")
GEOLOCATION_URL: str = os.environ.get("GEOLOCATION_URL", "https://ipapi.co/json/")
GEOLOCATION_TIMEOUT: int = _get_int("GEOLOCATION_TIMEOUT", 5)

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings handed to the weather query service.

    Attributes:
        api_key: Anthropic API key. Empty means unauthenticated.
        model: Model name used for both weather and suggestion calls.
        weather_max_tokens: Token cap for the search-grounded weather call.
        suggest_max_tokens: Token cap for the suggestion call.
        web_search_max_uses: How many searches the model may run per query.
    """

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    weather_max_tokens: int = 4096
    suggest_max_tokens: int = 512
    web_search_max_uses: int = 5

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the current environment and Streamlit secrets."""
        return cls(
            api_key=get_anthropic_api_key(),
            model=ANTHROPIC_MODEL,
            weather_max_tokens=WEATHER_MAX_TOKENS,
            suggest_max_tokens=SUGGEST_MAX_TOKENS,
            web_search_max_uses=WEB_SEARCH_MAX_USES,
        )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the app process."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
