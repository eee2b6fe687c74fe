"""AI weather lookup powered by the Anthropic Claude API.

The model searches the web for the requested location and answers with a
raw JSON weather payload, which is parsed here into a WeatherSnapshot.
Structured output is not used for this call because it does not mix well
with search-grounded answers, so the text is fence-stripped and parsed by
hand. Place-name suggestions use a forced tool call for strict output.

SDK failures are translated into a WeatherServiceError carrying a
WeatherErrorKind, so callers can pick a user message without parsing text.
"""

from __future__ import annotations

import json
import logging
from enum import Enum

import anthropic

from weatherai.config import Settings
from weatherai.models import (
    WeatherDataError,
    WeatherSnapshot,
    WeatherSource,
    is_coordinate_query,
)

logger = logging.getLogger(__name__)


class WeatherErrorKind(str, Enum):
    """Why a weather lookup failed."""

    PARSE_FAILED = "parse_failed"
    NETWORK_FAILED = "network_failed"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    AUTH_FAILED = "auth_failed"
    SERVER_ERROR = "server_error"
    SAFETY_BLOCKED = "safety_blocked"
    UNKNOWN = "unknown"


class WeatherServiceError(Exception):
    """Raised when the weather lookup fails.

    Attributes:
        kind: The failure category.
    """

    def __init__(self, kind: WeatherErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


MAX_SUGGESTIONS = 5

# Server tools can pause a long turn; the turn is resumed this many times.
_MAX_CONTINUATIONS = 3

_WEATHER_PROMPT = """\
Search for the current weather, 24-hour hourly forecast, and 7-day weekly forecast for "{location}" in South Korea.

Based ONLY on the search results, create a JSON object with the exact structure below.
IMPORTANT:
1. Return ONLY the raw JSON string. Do not use Markdown code blocks.
2. If specific hourly/weekly data is missing in search results, infer it reasonably from the available forecast data.
3. Translate 'condition' to one of: Sunny, Cloudy, Rainy, Snowy, Stormy, PartlyCloudy.
4. Translate 'description' and 'day' to Korean.

JSON Structure:
{{
  "locationName": "City Name (Korean)",
  "current": {{
    "temp": number (Celsius),
    "condition": "Sunny" | "Cloudy" | "Rainy" | "Snowy" | "Stormy" | "PartlyCloudy",
    "humidity": number (0-100),
    "windSpeed": number (m/s),
    "description": "Short Korean description"
  }},
  "hourly": [
    {{ "time": "HH:00", "temp": number, "condition": "String" }}
    // ... (24 items)
  ],
  "weekly": [
    {{ "day": "Day Name (Korean)", "maxTemp": number, "minTemp": number, "condition": "String" }}
    // ... (7 items)
  ]
}}
"""

_SUGGEST_PROMPT = (
    'User input: "{query}". Suggest up to 5 valid Korean city or district names '
    "that match or sound similar to the input. Return only the names."
)

_SUGGEST_TOOL = {
    "name": "suggest_places",
    "description": "Return matching Korean place names.",
    "input_schema": {
        "type": "object",
        "properties": {
            "names": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["names"],
    },
}


def _create_client(settings: Settings) -> anthropic.Anthropic:
    """Create an Anthropic client, failing as an auth error without a key."""
    if not settings.api_key:
        raise WeatherServiceError(
            WeatherErrorKind.AUTH_FAILED,
            "ANTHROPIC_API_KEY is not set (401).",
        )
    return anthropic.Anthropic(api_key=settings.api_key)


def _translate_api_error(exc: anthropic.APIError) -> WeatherServiceError:
    """Map an SDK exception onto a tagged WeatherServiceError."""
    if isinstance(exc, anthropic.APIConnectionError):
        return WeatherServiceError(
            WeatherErrorKind.NETWORK_FAILED, f"Network error reaching the AI service: {exc}"
        )
    if isinstance(exc, anthropic.APIStatusError):
        status = exc.status_code
        if status == 429:
            kind = WeatherErrorKind.RATE_LIMITED
        elif status == 400:
            kind = WeatherErrorKind.BAD_REQUEST
        elif status in (401, 403):
            kind = WeatherErrorKind.AUTH_FAILED
        elif status >= 500:
            kind = WeatherErrorKind.SERVER_ERROR
        else:
            kind = WeatherErrorKind.UNKNOWN
        return WeatherServiceError(kind, f"AI service request failed (HTTP {status}): {exc}")
    return WeatherServiceError(WeatherErrorKind.UNKNOWN, f"AI service request failed: {exc}")


def strip_code_fences(text: str) -> str:
    """Remove every markdown code fence marker and surrounding whitespace."""
    return text.replace("```json", "").replace("```", "").strip()


def _answer_text(content: list) -> str:
    """Join the text blocks the model wrote after its last search result."""
    last_result = -1
    for i, block in enumerate(content):
        if getattr(block, "type", None) == "web_search_tool_result":
            last_result = i
    return "".join(
        block.text
        for block in content[last_result + 1:]
        if getattr(block, "type", None) == "text"
    )


def extract_sources(content: list) -> list[WeatherSource]:
    """Collect grounding citations in the order they appear in a response.

    Both raw search results and the citations attached to text blocks are
    gathered. Search errors (a non-list result payload) are skipped.
    """
    sources: list[WeatherSource] = []
    for block in content:
        block_type = getattr(block, "type", None)
        if block_type == "web_search_tool_result":
            results = getattr(block, "content", None)
            if not isinstance(results, list):
                continue
            for result in results:
                if getattr(result, "type", None) == "web_search_result":
                    sources.append(WeatherSource(title=result.title or "", uri=result.url))
        elif block_type == "text":
            for citation in getattr(block, "citations", None) or []:
                url = getattr(citation, "url", None)
                if url:
                    sources.append(
                        WeatherSource(title=getattr(citation, "title", None) or "", uri=url)
                    )
    return dedupe_sources(sources)


def dedupe_sources(sources: list[WeatherSource]) -> list[WeatherSource]:
    """Drop repeated URIs, keeping the first occurrence and original order."""
    seen: set[str] = set()
    unique = []
    for source in sources:
        if source.uri in seen:
            continue
        seen.add(source.uri)
        unique.append(source)
    return unique


def parse_weather_text(text: str) -> WeatherSnapshot:
    """Parse the model's answer text into a snapshot (without sources).

    Raises:
        WeatherServiceError: With kind PARSE_FAILED if the text is not
            valid weather JSON after fence stripping.
    """
    json_str = strip_code_fences(text or "{}") or "{}"
    try:
        data = json.loads(json_str)
        return WeatherSnapshot.from_dict(data)
    except (ValueError, WeatherDataError) as exc:
        logger.error("Failed to parse weather JSON: %s", json_str)
        raise WeatherServiceError(
            WeatherErrorKind.PARSE_FAILED, "Invalid weather data format received"
        ) from exc


def get_weather(location: str, settings: Settings | None = None) -> WeatherSnapshot:
    """Look up current, hourly and weekly weather for a location.

    Args:
        location: A place name, or an encoded coordinate query. It is placed
            into the prompt verbatim.
        settings: Backend settings; read from the environment when omitted.

    Returns:
        WeatherSnapshot with deduplicated grounding sources attached.

    Raises:
        WeatherServiceError: If the API call fails, the model refuses, or
            the answer is not valid weather JSON.
    """
    settings = settings or Settings.from_env()
    client = _create_client(settings)

    messages: list[dict] = [
        {"role": "user", "content": _WEATHER_PROMPT.format(location=location)}
    ]
    tools = [
        {
            "type": "web_search_20250305",
            "name": "web_search",
            "max_uses": settings.web_search_max_uses,
        }
    ]

    content: list = []
    try:
        for _ in range(_MAX_CONTINUATIONS + 1):
            response = client.messages.create(
                model=settings.model,
                max_tokens=settings.weather_max_tokens,
                messages=messages,
                tools=tools,
            )
            content.extend(response.content)
            if response.stop_reason != "pause_turn":
                break
            messages = messages[:1] + [{"role": "assistant", "content": content}]
    except anthropic.APIError as exc:
        logger.error("Error fetching weather data for %r: %s", location, exc)
        raise _translate_api_error(exc) from exc

    if response.stop_reason == "refusal":
        logger.error("Weather request for %r was refused", location)
        raise WeatherServiceError(
            WeatherErrorKind.SAFETY_BLOCKED, "Response blocked by Safety filters"
        )

    snapshot = parse_weather_text(_answer_text(content))
    return snapshot.with_sources(extract_sources(content))


def get_place_suggestions(query: str, settings: Settings | None = None) -> list[str]:
    """Suggest up to five Korean place names matching partial input.

    Best-effort: returns an empty list for short or coordinate queries and
    on any failure.
    """
    if len(query) <= 1 or is_coordinate_query(query):
        return []

    try:
        settings = settings or Settings.from_env()
        client = _create_client(settings)
        response = client.messages.create(
            model=settings.model,
            max_tokens=settings.suggest_max_tokens,
            messages=[{"role": "user", "content": _SUGGEST_PROMPT.format(query=query)}],
            tools=[_SUGGEST_TOOL],
            tool_choice={"type": "tool", "name": _SUGGEST_TOOL["name"]},
        )
        for block in response.content:
            if getattr(block, "type", None) == "tool_use":
                names = block.input["names"]
                return [str(n).strip() for n in names if str(n).strip()][:MAX_SUGGESTIONS]
        return []
    except Exception as exc:
        logger.warning("Error fetching suggestions for %r: %s", query, exc)
        return []
