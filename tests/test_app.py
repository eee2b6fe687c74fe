"""Tests for the Streamlit wiring of the search bar."""

from unittest.mock import MagicMock, patch

import pytest

from weatherai import app
from weatherai.geolocation import BrowserGeolocator, IPGeolocator, Position
from weatherai.search import SEARCH_HINT, SearchBar, SearchState


class SessionState(dict):
    """Dict with attribute access, like st.session_state."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as exc:
            raise AttributeError(name) from exc

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture()
def bar():
    search_bar = SearchBar(
        on_search=MagicMock(),
        suggest=MagicMock(return_value=["서울", "서울 강남구"]),
        alert=MagicMock(),
        debounce_ms=0,
    )
    search_bar.mount()
    return search_bar


@pytest.fixture()
def mock_st(bar):
    with patch("weatherai.app.st") as st:
        st.session_state = SessionState(search_bar=bar, pending_query=None)
        st.button.return_value = False
        yield st


def _open_panel(bar):
    bar.input_text("서울")
    bar.tick()


class TestSuggestionPanel:
    """Test the suggestion buttons and the close control."""

    def test_renders_stretched_buttons_and_close_control(self, mock_st, bar):
        _open_panel(bar)

        app._render_suggestion_panel(bar)

        labels = [c.args[0] for c in mock_st.button.call_args_list]
        assert labels[:2] == ["\U0001f4cd 서울", "\U0001f4cd 서울 강남구"]
        assert "닫기" in labels[2]
        for c in mock_st.button.call_args_list:
            assert c.kwargs["width"] == "stretch"
            assert "use_container_width" not in c.kwargs
        assert mock_st.button.call_args_list[2].kwargs["on_click"] is app._on_outside_interaction

    def test_close_control_hides_panel(self, mock_st, bar):
        _open_panel(bar)

        app._on_outside_interaction()

        assert bar.visible_suggestions == []

    def test_no_buttons_without_suggestions(self, mock_st, bar):
        app._render_suggestion_panel(bar)
        mock_st.button.assert_not_called()

    def test_clicking_suggestion_searches(self, mock_st, bar):
        _open_panel(bar)
        mock_st.button.side_effect = lambda label, **kwargs: kwargs["key"] == "suggestion_1"

        app._render_suggestion_panel(bar)

        bar._on_search.assert_called_once_with("서울 강남구")
        mock_st.rerun.assert_called_once()


class TestSearchBarWidgets:
    """Test the search row rendering."""

    def _columns(self, mock_st):
        cols = (MagicMock(), MagicMock(), MagicMock())
        for col in cols:
            col.button.return_value = False
        mock_st.columns.return_value = cols
        return cols

    @patch("weatherai.app._render_suggestions")
    def test_shows_enter_hint(self, _suggestions, mock_st):
        self._columns(mock_st)

        app._render_search_bar(busy=False)

        mock_st.caption.assert_called_once_with(SEARCH_HINT)

    @patch("weatherai.app._render_suggestions")
    def test_locate_button_closes_panel_and_waits_for_browser(self, _suggestions, mock_st, bar):
        geolocator = MagicMock(supported=True)
        geolocator.get_current_position.return_value = None
        bar._geolocator = geolocator
        _, _, col_locate = self._columns(mock_st)
        col_locate.button.return_value = True

        app._render_search_bar(busy=False)

        assert col_locate.button.call_args.kwargs["on_click"] is app._on_outside_interaction
        assert bar.state == SearchState.LOCATING
        mock_st.caption.assert_called_once_with("위치 확인 중...")

    @patch("weatherai.app._render_suggestions")
    def test_pending_location_is_polled_on_rerun(self, _suggestions, mock_st, bar):
        geolocator = MagicMock(supported=True)
        geolocator.get_current_position.side_effect = [None, Position(37.5, 127.0)]
        bar._geolocator = geolocator
        bar.use_current_location()
        self._columns(mock_st)

        app._render_search_bar(busy=False)

        bar._on_search.assert_called_once_with("latitude: 37.5, longitude: 127.0")
        assert bar.state == SearchState.IDLE


class TestCreateGeolocator:
    """Test choosing the position provider."""

    def test_browser_is_default(self):
        with patch("weatherai.app.config.GEOLOCATION_PROVIDER", "browser"):
            assert isinstance(app._create_geolocator(), BrowserGeolocator)

    def test_ip_lookup_is_opt_in(self):
        with patch("weatherai.app.config.GEOLOCATION_PROVIDER", "ip"):
            assert isinstance(app._create_geolocator(), IPGeolocator)
