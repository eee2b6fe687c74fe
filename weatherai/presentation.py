"""Display helpers for a WeatherSnapshot.

Pure functions only: condition normalization, icons, Korean labels and the
geometry of the temperature charts. Rendering lives in ``weatherai.app``.
"""

from __future__ import annotations

from datetime import date

from weatherai.models import HourlyForecast, ViewMode, WeatherCondition, WeeklyForecast


# ---------------------------------------------------------------------------
# Weather condition -> emoji mapping
# ---------------------------------------------------------------------------

_CONDITION_ICONS: dict[WeatherCondition, str] = {
    WeatherCondition.SUNNY: "\u2600\ufe0f",
    WeatherCondition.CLOUDY: "\u2601\ufe0f",
    WeatherCondition.RAINY: "\U0001f327\ufe0f",
    WeatherCondition.SNOWY: "\U0001f328\ufe0f",
    WeatherCondition.STORMY: "\u26c8\ufe0f",
    WeatherCondition.PARTLY_CLOUDY: "\u26c5",
}


def normalize_condition(condition: str) -> WeatherCondition:
    """Match a free-form condition case-insensitively; unknown means Sunny."""
    lower = (condition or "").lower()
    for member in WeatherCondition:
        if member.value.lower() == lower:
            return member
    return WeatherCondition.SUNNY


def condition_icon(condition: str) -> str:
    """Map a condition string to a weather emoji."""
    return _CONDITION_ICONS[normalize_condition(condition)]


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

_KOREAN_WEEKDAYS = ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일")

VIEW_MODE_LABELS: dict[ViewMode, str] = {
    ViewMode.HOURLY: "시간별",
    ViewMode.WEEKLY: "주간별",
}

_CHART_TITLES: dict[ViewMode, str] = {
    ViewMode.HOURLY: "시간별 기온 변화",
    ViewMode.WEEKLY: "주간 예보",
}

_DETAIL_TITLES: dict[ViewMode, str] = {
    ViewMode.HOURLY: "상세 시간별 날씨",
    ViewMode.WEEKLY: "상세 주간 날씨",
}

SOURCES_TITLE = "날씨 정보 출처"


def format_korean_date(day: date) -> str:
    """Format a date like '2026년 10월 19일 월요일'."""
    return f"{day.year}년 {day.month}월 {day.day}일 {_KOREAN_WEEKDAYS[day.weekday()]}"


def chart_title(mode: ViewMode) -> str:
    return _CHART_TITLES[mode]


def detail_title(mode: ViewMode) -> str:
    return _DETAIL_TITLES[mode]


def format_temp(temp: float) -> str:
    """Show whole degrees without a trailing '.0'."""
    if float(temp).is_integer():
        return f"{int(temp)}\u00b0"
    return f"{temp}\u00b0"


# ---------------------------------------------------------------------------
# Temperature color mapping
# ---------------------------------------------------------------------------

def temp_to_color(temp_c: float) -> str:
    """Map a temperature (C) to a CSS color, cold to hot."""
    if temp_c <= -12:
        return "#4a148c"  # deep purple
    if temp_c <= 0:
        return "#5c6bc0"  # indigo
    if temp_c <= 10:
        return "#42a5f5"  # blue
    if temp_c <= 18:
        return "#26c6da"  # cyan
    if temp_c <= 24:
        return "#66bb6a"  # green
    if temp_c <= 29:
        return "#ffca28"  # amber
    if temp_c <= 35:
        return "#ff7043"  # deep orange
    return "#ef5350"


def compute_weekly_bars(weekly: list[WeeklyForecast]) -> list[dict]:
    """Compute weekly min-max bar positions and colors.

    Each day's bar is positioned relative to the overall min/max across all
    days, so the bars of a week share one scale.
    """
    if not weekly:
        return []

    global_min = min(min(w.min_temp, w.max_temp) for w in weekly)
    global_max = max(max(w.min_temp, w.max_temp) for w in weekly)
    spread = max(global_max - global_min, 1)

    bars = []
    for w in weekly:
        lo, hi = min(w.min_temp, w.max_temp), max(w.min_temp, w.max_temp)
        bars.append({
            "day": w.day,
            "icon": condition_icon(w.condition),
            "max_temp": w.max_temp,
            "min_temp": w.min_temp,
            "left_pct": ((lo - global_min) / spread) * 100,
            "width_pct": max(((hi - lo) / spread) * 100, 3),
            "color_lo": temp_to_color(lo),
            "color_hi": temp_to_color(hi),
        })
    return bars


def compute_hourly_bars(hourly: list[HourlyForecast]) -> list[dict]:
    """Compute column heights for the hourly temperature chart."""
    if not hourly:
        return []

    low = min(h.temp for h in hourly)
    high = max(h.temp for h in hourly)
    spread = max(high - low, 1)

    return [
        {
            "time": h.time,
            "temp": h.temp,
            "condition": h.condition,
            "icon": condition_icon(h.condition),
            # keep a visible stub for the coldest hour
            "height_pct": 15 + ((h.temp - low) / spread) * 85,
            "color": temp_to_color(h.temp),
        }
        for h in hourly
    ]
