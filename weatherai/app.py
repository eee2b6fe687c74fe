"""Mobile-style Streamlit weather app backed by AI web search.

Run with: streamlit run weatherai/app.py

The user searches a Korean place name (with AI suggestions) or uses the
current location; Claude searches the web and returns current, hourly and
weekly weather, shown as glass cards with temperature charts and the list
of sources the answer was grounded on.
"""

from __future__ import annotations

from datetime import date
from html import escape

import streamlit as st

from weatherai import config
from weatherai.geolocation import BrowserGeolocator, GeolocationOptions, IPGeolocator
from weatherai.models import ViewMode, WeatherSnapshot
from weatherai.presentation import (
    SOURCES_TITLE,
    VIEW_MODE_LABELS,
    chart_title,
    compute_hourly_bars,
    compute_weekly_bars,
    condition_icon,
    detail_title,
    format_korean_date,
    format_temp,
)
from weatherai.search import PLACEHOLDER, SEARCH_HINT, SearchBar, SearchState
from weatherai.shell import EMPTY_MESSAGE, LOADING_MESSAGE, WeatherShell
from weatherai.weather_service import get_place_suggestions, get_weather


# ---------------------------------------------------------------------------
# CSS injection: glassmorphism phone frame
# ---------------------------------------------------------------------------

def _inject_css() -> None:
    """Inject the mobile card styling."""
    st.markdown("""
    <style>
    .stApp { background: #f0f4f8 !important; }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    .block-container {
        padding-top: 1rem !important;
        padding-bottom: 2rem !important;
        max-width: 480px !important;
    }

    /* ===== CURRENT CONDITIONS CARD ===== */
    .wx-card {
        background: linear-gradient(135deg, #3b82f6 0%, #2563eb 100%);
        border-radius: 24px;
        padding: 24px;
        color: #ffffff;
        margin-bottom: 16px;
        box-shadow: 0 10px 25px rgba(37, 99, 235, 0.3);
    }
    .wx-location { font-size: 1.5rem; font-weight: 700; }
    .wx-date { font-size: 0.85rem; color: #dbeafe; margin-bottom: 20px; }
    .wx-main { display: flex; justify-content: space-between; align-items: center; }
    .wx-temp { font-size: 4rem; font-weight: 700; line-height: 1; }
    .wx-desc { font-size: 1.05rem; opacity: 0.9; }
    .wx-icon { font-size: 3.5rem; }
    .wx-stats {
        display: flex;
        justify-content: space-around;
        background: rgba(255, 255, 255, 0.12);
        border-radius: 12px;
        padding: 10px;
        margin-top: 20px;
        font-weight: 600;
        font-size: 0.9rem;
    }

    /* ===== GLASS CARD ===== */
    .glass-card {
        background: rgba(255, 255, 255, 0.8);
        backdrop-filter: blur(20px);
        -webkit-backdrop-filter: blur(20px);
        border-radius: 24px;
        padding: 20px;
        margin-bottom: 16px;
        box-shadow: 0 4px 12px rgba(0, 0, 0, 0.06);
        color: #1f2937;
    }
    .section-label { font-weight: 700; margin-bottom: 12px; }

    /* ===== HOURLY COLUMNS ===== */
    .hourly-chart {
        display: flex;
        align-items: flex-end;
        gap: 4px;
        height: 150px;
        overflow-x: auto;
        scrollbar-width: none;
    }
    .h-col { flex: 0 0 34px; text-align: center; font-size: 0.7rem; color: #6b7280; }
    .h-bar { border-radius: 6px 6px 0 0; margin: 2px 4px; opacity: 0.85; }

    /* ===== WEEKLY BARS ===== */
    .daily-row { display: flex; align-items: center; padding: 8px 0; }
    .daily-row .d-name { flex: 0 0 48px; font-weight: 600; color: #4b5563; }
    .daily-row .d-icon { flex: 0 0 32px; text-align: center; }
    .daily-row .d-lo { flex: 0 0 40px; text-align: right; color: #60a5fa; font-weight: 700; }
    .daily-row .d-bar-track {
        flex: 1; height: 6px; margin: 0 10px; position: relative;
        background: #e5e7eb; border-radius: 3px;
    }
    .daily-row .d-bar-fill { position: absolute; height: 100%; border-radius: 3px; }
    .daily-row .d-hi { flex: 0 0 40px; color: #f87171; font-weight: 700; }

    /* ===== DETAIL LIST ===== */
    .detail-row {
        display: flex; justify-content: space-between; align-items: center;
        padding: 10px 12px; margin-bottom: 8px;
        background: #f9fafb; border-radius: 12px;
    }
    .detail-row .r-label { width: 64px; color: #4b5563; font-weight: 500; }
    .detail-row .r-cond { flex: 1; text-align: center; color: #6b7280; font-size: 0.85rem; }
    .detail-row .r-temp { width: 80px; text-align: right; font-weight: 700; }

    /* ===== SOURCES ===== */
    .source-link {
        display: block; font-size: 0.75rem; color: #4b5563;
        padding: 6px 8px; border-radius: 8px; text-decoration: none;
        white-space: nowrap; overflow: hidden; text-overflow: ellipsis;
    }
    .source-link:hover { background: #eff6ff; color: #2563eb; }
    </style>
    """, unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

def _queue_search(query: str) -> None:
    """Defer a search to the main script run so it shows the spinner."""
    st.session_state.pending_query = query
    st.session_state.sync_search_text = True


def _queue_alert(message: str) -> None:
    st.session_state.alert_message = message


def _create_geolocator():
    """Pick the position provider named by GEOLOCATION_PROVIDER."""
    if config.GEOLOCATION_PROVIDER == "ip":
        return IPGeolocator()
    return BrowserGeolocator()


def _init_state() -> None:
    """Create the per-session shell and search bar once."""
    if "shell" in st.session_state:
        return

    settings = config.Settings.from_env()
    st.session_state.shell = WeatherShell(
        fetch=lambda query: get_weather(query, settings),
        default_city=config.DEFAULT_CITY,
    )
    bar = SearchBar(
        on_search=_queue_search,
        suggest=lambda query: get_place_suggestions(query, settings),
        alert=_queue_alert,
        geolocator=_create_geolocator(),
        debounce_ms=config.SUGGEST_DEBOUNCE_MS,
    )
    bar.mount()
    st.session_state.search_bar = bar
    st.session_state.pending_query = None
    st.session_state.alert_message = None


@st.dialog("알림")
def _show_alert(message: str) -> None:
    st.write(message)
    if st.button("확인", width="stretch"):
        st.rerun()


# ---------------------------------------------------------------------------
# Render: Search bar
# ---------------------------------------------------------------------------

def _on_query_change() -> None:
    st.session_state.search_bar.input_text(st.session_state.search_text)


def _on_outside_interaction() -> None:
    st.session_state.search_bar.pointer_down(inside=False)


def _render_suggestion_panel(bar: SearchBar) -> None:
    """Show suggestion buttons plus a control that closes the panel."""
    suggestions = bar.visible_suggestions
    for i, suggestion in enumerate(suggestions):
        if st.button(f"\U0001f4cd {suggestion}", key=f"suggestion_{i}", width="stretch"):
            bar.select(suggestion)
            st.rerun()
    if suggestions:
        st.button(
            "\u2715 닫기",
            key="close_suggestions",
            on_click=_on_outside_interaction,
            width="stretch",
        )


@st.fragment(run_every=0.5)
def _render_suggestions() -> None:
    """Poll the suggestion debounce and show the suggestion panel."""
    bar: SearchBar = st.session_state.search_bar
    bar.tick()
    _render_suggestion_panel(bar)


def _render_search_bar(busy: bool) -> None:
    bar: SearchBar = st.session_state.search_bar

    # widget state can only be written before the widget is created
    if st.session_state.get("sync_search_text"):
        st.session_state.search_text = bar.query
        st.session_state.sync_search_text = False

    col_input, col_search, col_locate = st.columns([6, 1, 1], vertical_alignment="bottom")
    col_input.text_input(
        "지역 검색",
        key="search_text",
        placeholder=PLACEHOLDER,
        label_visibility="collapsed",
        on_change=_on_query_change,
        disabled=busy,
    )
    if col_search.button("\U0001f50d", key="search_btn", disabled=busy, help="검색"):
        bar.submit()

    locating = bar.state == SearchState.LOCATING
    if col_locate.button(
        "\U0001f4cd",
        key="locate_btn",
        disabled=busy or locating,
        help="현위치 검색",
        on_click=_on_outside_interaction,
    ):
        bar.use_current_location(
            GeolocationOptions(timeout_ms=config.GEOLOCATION_TIMEOUT * 1000)
        )
    elif locating:
        bar.poll_location()

    if bar.state == SearchState.LOCATING:
        st.caption("위치 확인 중...")
    else:
        st.caption(SEARCH_HINT)
    if st.session_state.pending_query is not None and st.session_state.get("sync_search_text"):
        st.rerun()

    _render_suggestions()


# ---------------------------------------------------------------------------
# Render: Weather
# ---------------------------------------------------------------------------

def _render_current(data: WeatherSnapshot) -> None:
    """Render the current-conditions card."""
    current = data.current
    st.markdown(
        f'<div class="wx-card">'
        f'<div class="wx-location">{escape(data.location_name)}</div>'
        f'<div class="wx-date">{format_korean_date(date.today())}</div>'
        f'<div class="wx-main">'
        f'<div><div class="wx-temp">{round(current.temp)}\u00b0</div>'
        f'<div class="wx-desc">{escape(current.description)}</div></div>'
        f'<div class="wx-icon">{condition_icon(current.condition)}</div>'
        f'</div>'
        f'<div class="wx-stats">'
        f'<span>\U0001f32c\ufe0f {current.wind_speed:g} m/s</span>'
        f'<span>\U0001f4a7 {current.humidity:g}%</span>'
        f'</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_hourly_chart(data: WeatherSnapshot) -> str:
    columns = ""
    for i, bar in enumerate(compute_hourly_bars(data.hourly)):
        # label every third hour to keep the axis readable
        label = escape(bar["time"]) if i % 3 == 0 else "&nbsp;"
        columns += (
            f'<div class="h-col" title="{escape(bar["condition"])}">'
            f'<div>{format_temp(bar["temp"])}</div>'
            f'<div class="h-bar" style="height:{bar["height_pct"] * 0.9:.0f}px;'
            f'background:{bar["color"]};"></div>'
            f'<div>{label}</div>'
            f'</div>'
        )
    return f'<div class="hourly-chart">{columns}</div>'


def _render_weekly_chart(data: WeatherSnapshot) -> str:
    rows = ""
    for bar in compute_weekly_bars(data.weekly):
        rows += (
            f'<div class="daily-row">'
            f'<div class="d-name">{escape(bar["day"])}</div>'
            f'<div class="d-icon">{bar["icon"]}</div>'
            f'<div class="d-lo">{format_temp(bar["min_temp"])}</div>'
            f'<div class="d-bar-track">'
            f'<div class="d-bar-fill" style="left:{bar["left_pct"]:.1f}%;width:{bar["width_pct"]:.1f}%;'
            f'background:linear-gradient(90deg,{bar["color_lo"]},{bar["color_hi"]});">'
            f'</div></div>'
            f'<div class="d-hi">{format_temp(bar["max_temp"])}</div>'
            f'</div>'
        )
    return rows


def _render_details(data: WeatherSnapshot, mode: ViewMode) -> str:
    rows = ""
    if mode == ViewMode.HOURLY:
        for h in data.hourly:
            rows += (
                f'<div class="detail-row">'
                f'<span class="r-label">{escape(h.time)}</span>'
                f'<span class="r-cond">{condition_icon(h.condition)} {escape(h.condition)}</span>'
                f'<span class="r-temp">{format_temp(h.temp)}</span>'
                f'</div>'
            )
    else:
        for w in data.weekly:
            rows += (
                f'<div class="detail-row">'
                f'<span class="r-label">{escape(w.day)}</span>'
                f'<span class="r-cond">{condition_icon(w.condition)}</span>'
                f'<span class="r-temp"><span style="color:#f87171">{format_temp(w.max_temp)}</span> '
                f'<span style="color:#60a5fa">{format_temp(w.min_temp)}</span></span>'
                f'</div>'
            )
    return rows


def _render_sources(data: WeatherSnapshot) -> None:
    if not data.sources:
        return
    links = "".join(
        f'<a class="source-link" href="{escape(s.uri)}" target="_blank" '
        f'rel="noopener noreferrer">\U0001f517 {escape(s.title or s.uri)}</a>'
        for s in data.sources
    )
    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">{SOURCES_TITLE}</div>'
        f'{links}'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_weather(data: WeatherSnapshot) -> None:
    """Render the current card, toggleable chart, detail list and sources."""
    _render_current(data)

    mode = st.radio(
        "보기",
        options=list(ViewMode),
        format_func=lambda m: VIEW_MODE_LABELS[m],
        horizontal=True,
        key="view_mode",
        label_visibility="collapsed",
        on_change=_on_outside_interaction,
    )

    chart = (
        _render_hourly_chart(data) if mode == ViewMode.HOURLY else _render_weekly_chart(data)
    )
    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">{chart_title(mode)}</div>'
        f'{chart}'
        f'</div>',
        unsafe_allow_html=True,
    )
    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">{detail_title(mode)}</div>'
        f'{_render_details(data, mode)}'
        f'</div>',
        unsafe_allow_html=True,
    )
    _render_sources(data)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    """Main Streamlit application entry point."""
    st.set_page_config(
        page_title="WeatherAI",
        page_icon="\U0001f324\ufe0f",
        layout="centered",
    )
    config.configure_logging()
    _inject_css()
    _init_state()

    shell: WeatherShell = st.session_state.shell

    st.markdown("## \U0001f324\ufe0f WeatherAI")
    _render_search_bar(busy=shell.loading)

    if st.session_state.alert_message:
        message = st.session_state.alert_message
        st.session_state.alert_message = None
        _show_alert(message)

    pending = st.session_state.pending_query
    if pending is not None or not shell.initialized:
        st.session_state.pending_query = None
        with st.spinner(LOADING_MESSAGE):
            if pending is not None:
                shell.search(pending)
            else:
                shell.start()

    if shell.error:
        st.error(shell.error)

    if shell.data is not None:
        _render_weather(shell.data)
    elif shell.show_empty_state:
        st.markdown(
            f'<div style="text-align:center;color:#9ca3af;padding:80px 0;">{EMPTY_MESSAGE}</div>',
            unsafe_allow_html=True,
        )


if __name__ == "__main__":
    main()
