"""Single-shot device position lookup for the "current location" button.

A Streamlit script runs on the server, so the browser's position is read
through a small JS component (``BrowserGeolocator``). The component answers
on a later rerun; until then ``get_current_position`` returns None.
``IPGeolocator`` is an opt-in fallback that asks an IP geolocation service
over HTTP for the position of the machine running the app.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from streamlit_js_eval import streamlit_js_eval

from weatherai import config


class GeolocationError(Exception):
    """Raised when the current position cannot be determined."""


class GeolocationUnsupportedError(GeolocationError):
    """Raised when no geolocation provider is configured."""


@dataclass(frozen=True)
class GeolocationOptions:
    """Options for a position request.

    Attributes:
        high_accuracy: Ask for the most precise fix the provider offers.
        timeout_ms: Hard limit for the whole request.
        maximum_age_ms: Oldest acceptable cached position; 0 means always
            look up a fresh one.
    """

    high_accuracy: bool = True
    timeout_ms: int = 5000
    maximum_age_ms: int = 0


@dataclass(frozen=True)
class Position:
    """A resolved position in decimal degrees."""

    latitude: float
    longitude: float


# navigator.geolocation error code for a missing API; browsers use 1-3.
_UNSUPPORTED_CODE = 0

_POSITION_SCRIPT = """\
new Promise((resolve) => {{
  if (!navigator.geolocation) {{
    resolve({{error: {{code: 0, message: "Geolocation is not supported."}}}});
    return;
  }}
  navigator.geolocation.getCurrentPosition(
    (p) => resolve({{coords: {{latitude: p.coords.latitude, longitude: p.coords.longitude,
                               accuracy: p.coords.accuracy}}}}),
    (e) => resolve({{error: {{code: e.code, message: e.message}}}}),
    {{enableHighAccuracy: {high_accuracy}, timeout: {timeout_ms}, maximumAge: {maximum_age_ms}}}
  );
}})
"""


def position_script(options: GeolocationOptions) -> str:
    """Build the JS expression that asks the browser for one position."""
    return _POSITION_SCRIPT.format(
        high_accuracy="true" if options.high_accuracy else "false",
        timeout_ms=int(options.timeout_ms),
        maximum_age_ms=int(options.maximum_age_ms),
    )


class BrowserGeolocator:
    """Position provider backed by the browser's ``navigator.geolocation``.

    Each request renders a JS component under a fresh key. The component
    replies on a later script rerun, so ``get_current_position`` returns
    None until the browser has answered. Once an answer (a position or an
    error) is consumed, the next call starts a new browser request.
    """

    supported = True

    def __init__(self, key_prefix: str = "browser_position"):
        self.key_prefix = key_prefix
        self._request = 0

    @property
    def component_key(self) -> str:
        return f"{self.key_prefix}_{self._request}"

    def get_current_position(self, options: GeolocationOptions | None = None) -> Position | None:
        """Return the browser position, or None while the browser is still answering.

        Raises:
            GeolocationUnsupportedError: If the browser has no geolocation API.
            GeolocationError: If the user denied access, the request timed
                out or the reply could not be read.
        """
        options = options or GeolocationOptions()
        reply = streamlit_js_eval(js_expressions=position_script(options), key=self.component_key)
        if reply is None:
            return None

        self._request += 1
        if not isinstance(reply, dict):
            raise GeolocationError("Received an invalid position response.")
        error = reply.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            if code == _UNSUPPORTED_CODE:
                raise GeolocationUnsupportedError("Geolocation is not available.")
            raise GeolocationError(f"Browser position request failed: {error}")

        try:
            coords = reply["coords"]
            return Position(latitude=float(coords["latitude"]), longitude=float(coords["longitude"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeolocationError("Position response has no coordinates.") from exc


class IPGeolocator:
    """Position provider backed by an IP geolocation JSON endpoint.

    The position is that of the machine running the app, so this is only
    meaningful for local runs. ``high_accuracy`` has no effect here.
    """

    def __init__(self, url: str | None = None):
        self.url = config.GEOLOCATION_URL if url is None else url

    @property
    def supported(self) -> bool:
        return bool(self.url)

    def get_current_position(self, options: GeolocationOptions | None = None) -> Position:
        """Look up the current position once.

        Raises:
            GeolocationUnsupportedError: If no endpoint is configured.
            GeolocationError: On timeouts, HTTP errors or a response without
                coordinates.
        """
        if not self.supported:
            raise GeolocationUnsupportedError("Geolocation is not available.")
        options = options or GeolocationOptions()

        headers = {"Cache-Control": "no-cache"} if options.maximum_age_ms == 0 else {}
        try:
            response = httpx.get(
                self.url,
                headers=headers,
                timeout=options.timeout_ms / 1000,
            )
        except httpx.TimeoutException as exc:
            raise GeolocationError("Position request timed out.") from exc
        except httpx.HTTPError as exc:
            raise GeolocationError(f"HTTP error during position request: {exc}") from exc

        if response.status_code != 200:
            raise GeolocationError(
                f"Position request failed (HTTP {response.status_code})."
            )

        try:
            data = response.json()
            lat = data.get("latitude", data.get("lat"))
            lon = data.get("longitude", data.get("lon"))
            if lat is None or lon is None:
                raise GeolocationError("Position response has no coordinates.")
            return Position(latitude=float(lat), longitude=float(lon))
        except (ValueError, TypeError, AttributeError) as exc:
            raise GeolocationError("Received an invalid position response.") from exc
