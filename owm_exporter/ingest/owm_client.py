"""OpenWeatherMap current-weather API client."""

import logging

import httpx

from owm_exporter.config.schema import OWM_BASE_URL

logger = logging.getLogger(__name__)

CURRENT_WEATHER_PATH = "/data/2.5/weather"
DEFAULT_USER_AGENT = "owm-exporter/0.1.0"


class OwmClientError(Exception):
    """Raised when a current-weather request cannot be completed."""


class OwmTransportError(OwmClientError):
    """Connection failure, TLS failure or timeout."""


class OwmStatusError(OwmClientError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class OwmDecodeError(OwmClientError):
    """Response body is not the expected JSON document."""


class OwmClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = OWM_BASE_URL,
        units: str = "metric",
        language: str = "en",
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.language = language
        self.timeout = timeout
        self.user_agent = user_agent

    def get_current(
        self, lat: float, lon: float, timeout: float | None = None
    ) -> dict:
        """Fetch current conditions for a coordinate pair.

        Makes exactly one request. ``timeout`` overrides the client default
        for this call only.
        """
        url = f"{self.base_url}{CURRENT_WEATHER_PATH}"
        params = {
            "lat": lat,
            "lon": lon,
            "units": self.units,
            "lang": self.language,
            "appid": self.api_key,
        }
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            resp = httpx.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout if timeout is None else timeout,
            )
        except httpx.RequestError as e:
            raise OwmTransportError(f"request to {url} failed: {e}") from e

        logger.debug("Got response from API, code=%d", resp.status_code)
        if not resp.is_success:
            raise OwmStatusError(
                f"{url} returned HTTP {resp.status_code}", resp.status_code
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise OwmDecodeError(f"undecodable response body: {e}") from e
        if not isinstance(data, dict):
            raise OwmDecodeError(
                f"expected JSON object, got {type(data).__name__}"
            )
        return data
