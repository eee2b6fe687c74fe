"""Top-level app state: the current snapshot, loading flag and error banner.

Only the most recent search may update the state. Each search takes a
sequence number and results from a superseded search are dropped.
"""

from __future__ import annotations

import logging
from typing import Callable

from weatherai.models import WeatherSnapshot
from weatherai.weather_service import WeatherErrorKind, WeatherServiceError

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "해당 지역의 날씨 정보를 찾을 수 없습니다. 정확한 지역명을 입력해주세요."
NETWORK_MESSAGE = "네트워크 연결 상태를 확인해주세요."
RATE_LIMIT_MESSAGE = "요청 횟수가 너무 많습니다. 잠시 후 다시 시도해주세요."
BAD_REQUEST_MESSAGE = "잘못된 요청입니다. 입력값을 확인해주세요."
AUTH_MESSAGE = "API 인증 오류가 발생했습니다. 관리자에게 문의하세요."
SERVER_ERROR_MESSAGE = "서버에 일시적인 문제가 발생했습니다. 나중에 다시 시도해주세요."
SAFETY_MESSAGE = "안전 정책에 의해 요청이 차단되었습니다."
FALLBACK_MESSAGE = "날씨 정보를 가져오는데 실패했습니다. 잠시 후 다시 시도해주세요."

LOADING_MESSAGE = "AI가 날씨를 분석중입니다..."
EMPTY_MESSAGE = "지역을 검색하여 날씨를 확인하세요."

_KIND_MESSAGES: dict[WeatherErrorKind, str] = {
    WeatherErrorKind.PARSE_FAILED: NOT_FOUND_MESSAGE,
    WeatherErrorKind.NETWORK_FAILED: NETWORK_MESSAGE,
    WeatherErrorKind.RATE_LIMITED: RATE_LIMIT_MESSAGE,
    WeatherErrorKind.BAD_REQUEST: BAD_REQUEST_MESSAGE,
    WeatherErrorKind.AUTH_FAILED: AUTH_MESSAGE,
    WeatherErrorKind.SERVER_ERROR: SERVER_ERROR_MESSAGE,
    WeatherErrorKind.SAFETY_BLOCKED: SAFETY_MESSAGE,
    WeatherErrorKind.UNKNOWN: FALLBACK_MESSAGE,
}

# Checked in order; the first pattern found in the message wins.
_MESSAGE_PATTERNS: list[tuple[tuple[str, ...], str]] = [
    (("No data returned", "JSON", "Invalid weather data format"), NOT_FOUND_MESSAGE),
    (("fetch failed", "Network"), NETWORK_MESSAGE),
    (("429",), RATE_LIMIT_MESSAGE),
    (("400",), BAD_REQUEST_MESSAGE),
    (("401", "403"), AUTH_MESSAGE),
    (("500", "503"), SERVER_ERROR_MESSAGE),
    (("Safety",), SAFETY_MESSAGE),
]


def classify_error_message(message: str) -> str:
    """Pick a user message by matching substrings of an error's text."""
    for needles, user_message in _MESSAGE_PATTERNS:
        if any(needle in message for needle in needles):
            return user_message
    return FALLBACK_MESSAGE


def classify_error(exc: BaseException) -> str:
    """Pick the user-facing message for a failed weather search."""
    if isinstance(exc, WeatherServiceError):
        return _KIND_MESSAGES[exc.kind]
    return classify_error_message(str(exc))


class WeatherShell:
    """Owns the weather shown on screen.

    Args:
        fetch: Returns the snapshot for a query (usually ``get_weather``).
        default_city: Query issued by ``start()``.
    """

    def __init__(self, fetch: Callable[[str], WeatherSnapshot], default_city: str = "서울"):
        self._fetch = fetch
        self.default_city = default_city
        self.data: WeatherSnapshot | None = None
        self.loading = False
        self.error: str | None = None
        self.initialized = False
        self._started = False
        self._sequence = 0

    def start(self) -> None:
        """Load the default city the first time the app is shown."""
        if self._started:
            return
        self._started = True
        self.search(self.default_city)

    def search(self, location: str) -> None:
        self._sequence += 1
        sequence = self._sequence
        self.loading = True
        self.error = None
        try:
            snapshot = self._fetch(location)
        except Exception as exc:
            if sequence != self._sequence:
                logger.info("Dropping failure of superseded search for %r", location)
                return
            logger.error("Search failed for %r: %s", location, exc)
            self.error = classify_error(exc)
        else:
            if sequence != self._sequence:
                logger.info("Dropping result of superseded search for %r", location)
                return
            self.data = snapshot
            self.initialized = True
        finally:
            if sequence == self._sequence:
                self.loading = False

    @property
    def show_empty_state(self) -> bool:
        return self.data is None and not self.initialized and not self.error
