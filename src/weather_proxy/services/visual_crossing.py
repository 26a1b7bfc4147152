"""Visual Crossing Timeline API client."""

from typing import Any

import httpx
from prometheus_client import Counter, Histogram

from weather_proxy.config import Settings
from weather_proxy.services.coordinates import Coordinate, format_coordinate

REQUESTED_ELEMENTS = (
    "datetime",
    "temp",
    "tempmax",
    "tempmin",
    "feelslike",
    "humidity",
    "precip",
    "precipprob",
    "windspeed",
    "conditions",
    "icon",
)


class CredentialMissingError(Exception):
    """Raised when no Visual Crossing API key is configured."""


class UpstreamError(Exception):
    """Base exception for Visual Crossing client errors."""


class UpstreamTimeoutError(UpstreamError):
    """Raised when upstream request times out."""


class UpstreamHTTPError(UpstreamError):
    """Raised when upstream answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: Any) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamUnreachableError(UpstreamError):
    """Raised when upstream cannot be reached."""


class UpstreamPayloadError(UpstreamError):
    """Raised when upstream answers 2xx with an unusable body."""


# Metrics
upstream_requests = Counter(
    "upstream_requests_total",
    "Total upstream API requests",
    ["status"],
)
upstream_duration = Histogram(
    "upstream_request_duration_seconds",
    "Upstream request duration in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


class VisualCrossingClient:
    """HTTP client for the Visual Crossing Timeline API."""

    def __init__(self, settings: Settings) -> None:
        """Initialize client with settings."""
        self._base_url = settings.upstream_url.rstrip("/")
        self._timeout = settings.upstream_timeout_seconds
        self._api_key = settings.visual_crossing_api_key

    @property
    def has_credential(self) -> bool:
        """Whether an API key is configured."""
        return bool(self._api_key)

    async def fetch_timeline(self, coord: Coordinate) -> dict[str, Any]:
        """Fetch current, hourly and daily data for rounded coordinates.

        Args:
            coord: Coordinate already rounded to the cache grid

        Returns:
            Raw Visual Crossing response body

        Raises:
            CredentialMissingError: If no API key is configured
            UpstreamTimeoutError: If request times out
            UpstreamHTTPError: If upstream returns a non-2xx status
            UpstreamUnreachableError: If the request cannot be completed
            UpstreamPayloadError: If the body is not a JSON object
        """
        if not self.has_credential:
            raise CredentialMissingError(
                "VISUAL_CROSSING_API_KEY environment variable is missing"
            )

        url = f"{self._base_url}/{format_coordinate(coord)}"
        params = {
            "unitGroup": "metric",
            "key": self._api_key,
            "include": "hours,current,days",
            "elements": ",".join(REQUESTED_ELEMENTS),
        }

        with upstream_duration.time():
            try:
                async with httpx.AsyncClient(
                    timeout=self._timeout, follow_redirects=True
                ) as client:
                    response = await client.get(url, params=params)

            except httpx.TimeoutException as e:
                upstream_requests.labels(status="timeout").inc()
                raise UpstreamTimeoutError(
                    f"Visual Crossing API request timed out after {self._timeout}s"
                ) from e

            except httpx.RequestError as e:
                upstream_requests.labels(status="error").inc()
                raise UpstreamUnreachableError(
                    f"Visual Crossing API request failed: {e}"
                ) from e

        if not response.is_success:
            upstream_requests.labels(status="error").inc()
            body = self._error_body(response)
            raise UpstreamHTTPError(
                self._error_message(response, body),
                response.status_code,
                body,
            )

        upstream_requests.labels(status="success").inc()
        return self._parse_response(response)

    @staticmethod
    def _error_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(response: httpx.Response, body: Any) -> str:
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        if isinstance(body, str) and body.strip():
            return body.strip()
        return f"Visual Crossing API returned {response.status_code}"

    def _parse_response(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a successful response body.

        Raises:
            UpstreamPayloadError: If the body is not a JSON object
        """
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamPayloadError("Visual Crossing API returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamPayloadError("Visual Crossing API returned an unexpected payload")

        return data
