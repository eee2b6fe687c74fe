"""Search input: free text, debounced suggestions and current location.

``SearchBar`` holds the input state independently of Streamlit so the
debounce and the geolocation flow can be driven directly in tests. The app
forwards widget events to it and polls ``tick()`` on a timer.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from weatherai.geolocation import (
    GeolocationError,
    GeolocationOptions,
    GeolocationUnsupportedError,
)
from weatherai.models import encode_coordinates, is_coordinate_query

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "이 브라우저에서는 위치 서비스를 지원하지 않습니다."
LOCATE_FAILED_MESSAGE = "위치 정보를 가져오는 데 실패했습니다. 권한을 확인해주세요."
LOCATING_LABEL = "현위치 (확인 중...)"
PLACEHOLDER = "지역을 입력하세요 (예: 서울, 강남구)"
SEARCH_HINT = "Enter를 누르면 추천 지역을 보여주고, \U0001f50d 버튼을 누르면 날씨를 검색합니다."


class SearchState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    LOCATING = "locating"
    SUBMITTING = "submitting"


class Debouncer:
    """Holds the latest value until it has been quiet for ``delay`` seconds."""

    def __init__(self, delay: float, clock: Callable[[], float] = time.monotonic):
        self.delay = delay
        self._clock = clock
        self._value: str | None = None
        self._deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def push(self, value: str) -> None:
        """Store a value and restart the quiet period."""
        self._value = value
        self._deadline = self._clock() + self.delay

    def cancel(self) -> None:
        self._value = None
        self._deadline = None

    def ready(self) -> str | None:
        """Return the pending value once its quiet period is over, else None."""
        if self._deadline is None or self._clock() < self._deadline:
            return None
        value = self._value
        self.cancel()
        return value


class SearchBar:
    """State for the location search box.

    Args:
        on_search: Called with the query to look up.
        suggest: Returns place suggestions for partial input.
        alert: Shows a blocking notification to the user.
        geolocator: Position provider, or None when unavailable.
        debounce_ms: Quiet period before suggestions are fetched.
        clock: Monotonic clock in seconds, injectable for tests.
    """

    def __init__(
        self,
        on_search: Callable[[str], None],
        suggest: Callable[[str], list[str]],
        alert: Callable[[str], None],
        geolocator=None,
        debounce_ms: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._on_search = on_search
        self._suggest = suggest
        self._alert = alert
        self._geolocator = geolocator
        self._debouncer = Debouncer(debounce_ms / 1000, clock=clock)
        self._listening = False
        self._locate_options = GeolocationOptions()

        self.query = ""
        self.suggestions: list[str] = []
        self.show_suggestions = False
        self.state = SearchState.IDLE

    # Lifecycle -----------------------------------------------------------
    def mount(self) -> None:
        self._listening = True

    def unmount(self) -> None:
        self._listening = False
        self._debouncer.cancel()
        if self.state == SearchState.DEBOUNCING:
            self.state = SearchState.IDLE

    # Events --------------------------------------------------------------
    def input_text(self, text: str) -> None:
        """Record user input and restart the suggestion debounce."""
        self.query = text
        self._debouncer.push(text)
        self.state = SearchState.DEBOUNCING

    def tick(self) -> bool:
        """Fetch suggestions if the debounce has elapsed.

        Returns:
            True if the suggestion panel changed.
        """
        query = self._debouncer.ready()
        if query is None:
            return False
        self.state = SearchState.IDLE

        if len(query) > 1 and not is_coordinate_query(query):
            self.suggestions = self._suggest(query)
            self.show_suggestions = True
        else:
            self.suggestions = []
            self.show_suggestions = False
        return True

    def submit(self) -> None:
        if self.query.strip():
            self._search(self.query)

    def select(self, suggestion: str) -> None:
        self.query = suggestion
        self._search(suggestion)

    def pointer_down(self, inside: bool) -> None:
        """Close the suggestion panel on a click outside the search box."""
        if self._listening and not inside:
            self.show_suggestions = False

    def use_current_location(self, options: GeolocationOptions | None = None) -> None:
        """Search for the weather at the device's current position.

        Providers that answer on a later rerun leave the bar in LOCATING;
        the app keeps calling ``poll_location()`` until it settles.
        """
        if self._geolocator is None or not getattr(self._geolocator, "supported", True):
            self._alert(UNSUPPORTED_MESSAGE)
            return

        self._locate_options = options or GeolocationOptions()
        self.state = SearchState.LOCATING
        self.poll_location()

    def poll_location(self) -> bool:
        """Check on a running position request.

        Returns:
            True once the request has settled, with a search issued or an
            alert shown.
        """
        if self.state != SearchState.LOCATING:
            return False
        try:
            position = self._geolocator.get_current_position(self._locate_options)
        except GeolocationUnsupportedError:
            self.state = SearchState.IDLE
            self._alert(UNSUPPORTED_MESSAGE)
            return True
        except GeolocationError as exc:
            logger.warning("Geolocation error: %s", exc)
            self.state = SearchState.IDLE
            self._alert(LOCATE_FAILED_MESSAGE)
            return True
        if position is None:
            return False

        self.query = LOCATING_LABEL
        self._search(encode_coordinates(position.latitude, position.longitude))
        return True

    @property
    def visible_suggestions(self) -> list[str]:
        return self.suggestions if self.show_suggestions else []

    def _search(self, query: str) -> None:
        self._debouncer.cancel()
        self.show_suggestions = False
        self.state = SearchState.SUBMITTING
        try:
            self._on_search(query)
        finally:
            self.state = SearchState.IDLE
