"""APOD API client with a one-day fallback using httpx for async HTTP calls."""

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import httpx

from apod_client.models import FetchResult, ImageRecord
from apod_client.utils import format_date, previous_day

logger = logging.getLogger(__name__)

# Astronomy Picture of the Day endpoint
APOD_BASE_URL = "https://api.nasa.gov/planetary/apod"

# Connect/read/write/pool timeout in seconds
DEFAULT_TIMEOUT = 30.0


class FetchError(Exception):
    """Base exception for APOD fetch failures."""

    pass


class NetworkError(FetchError):
    """Transport-level failure: DNS, connection refused, timeout."""

    pass


class HttpError(FetchError):
    """Non-success HTTP status on a date-scoped request."""

    def __init__(self, status_code: int, status_text: str) -> None:
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(f"HTTP {status_code}: {status_text}")


class NoImageForDate(FetchError):
    """The endpoint reported that it has no image for the requested date."""

    def __init__(self, date: str, message: str) -> None:
        self.date = date
        super().__init__(f"No image for date {date}: {message}")


class ParseError(FetchError):
    """The response body was not a usable JSON record."""

    pass


class UnknownError(FetchError):
    """Any failure that fits none of the other categories."""

    pass


def parse_record(payload: Any) -> ImageRecord:
    """Build an ImageRecord from a decoded JSON body.

    Missing or null fields become empty strings; a missing, null or empty
    ``hdurl`` becomes None.

    Args:
        payload: Decoded JSON body

    Returns:
        The parsed record

    Raises:
        ParseError: If the body is not an object or a field is not a string
    """
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")

    def text(name: str) -> str:
        value = payload.get(name)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ParseError(
                f"Field '{name}' must be a string, got {type(value).__name__}"
            )
        return value

    return ImageRecord(
        date=text("date"),
        title=text("title"),
        explanation=text("explanation"),
        url=text("url"),
        hd_url=text("hdurl") or None,
        media_type=text("media_type"),
        service_version=text("service_version"),
    )


def _soft_error(response: httpx.Response) -> str | None:
    """Return the body's ``error`` message, or None if it carries none."""
    if not response.content:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict) or "error" not in payload:
        return None

    error = payload["error"]
    # Gateway errors nest the message: {"error": {"code": ..., "message": ...}}
    if isinstance(error, dict):
        return str(error.get("message", error))
    return str(error)


class ApodAPIClient:
    """Client for the APOD endpoint using httpx."""

    def __init__(
        self,
        api_key: str,
        base_url: str = APOD_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize APOD API client.

        Args:
            api_key: API key sent with every request
            base_url: Endpoint URL
            timeout: Connect, read and write timeout in seconds
            today: Returns the local calendar date the fallback is computed from
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.today = today
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ApodAPIClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the httpx AsyncClient instance.

        Returns:
            The httpx.AsyncClient instance

        Raises:
            RuntimeError: If client is used outside of async context manager
        """
        if self._client is None:
            raise RuntimeError("Client must be used within async context manager")
        return self._client

    async def fetch_latest(self) -> FetchResult:
        """Fetch today's record, falling back to yesterday's.

        Any failure to get a record for today (transport error, HTTP error,
        empty body or an ``error`` field in the body) triggers exactly one
        date-scoped request for the previous local calendar day, whose
        outcome becomes the result.

        Returns:
            FetchResult holding the record or the error
        """
        client = self.client

        try:
            try:
                response = await self._get(client, {})
            except httpx.TransportError as e:
                logger.warning(
                    f"Network error fetching today's image, trying previous day: {e}"
                )
                return await self._fetch_previous_day()

            logger.debug(f"Today's image response status: {response.status_code}")

            if not response.is_success or not response.content:
                logger.warning(
                    f"No image for today (HTTP {response.status_code}), "
                    "trying previous day"
                )
                return await self._fetch_previous_day()

            message = _soft_error(response)
            if message is not None:
                logger.warning(f"No image for today: {message}, trying previous day")
                return await self._fetch_previous_day()

            record = self._parse_body(response)
            logger.info(f"Fetched today's image: {record.title} ({record.date})")
            return FetchResult.ok(record)
        except FetchError as e:
            logger.error(f"Failed to fetch today's image: {e}")
            return FetchResult.fail(e)
        except Exception as e:
            logger.error(f"Unexpected error fetching today's image: {e}", exc_info=True)
            return FetchResult.fail(UnknownError(f"Unexpected error: {e}"))

    async def fetch_for_date(self, date: str) -> FetchResult:
        """Fetch the record for a specific date.

        Args:
            date: Date as ``YYYY-MM-DD``

        Returns:
            FetchResult holding the record, or one of NetworkError, HttpError,
            NoImageForDate, ParseError or UnknownError
        """
        client = self.client

        try:
            try:
                response = await self._get(client, {"date": date})
            except httpx.TransportError as e:
                logger.error(f"Network error fetching image for {date}: {e}")
                return FetchResult.fail(NetworkError(f"Network request failed: {e}"))

            message = _soft_error(response)
            if message is not None:
                logger.warning(f"No image for {date}: {message}")
                return FetchResult.fail(NoImageForDate(date, message))

            if not response.is_success:
                error = HttpError(response.status_code, response.reason_phrase)
                logger.error(f"Failed to fetch image for {date}: {error}")
                return FetchResult.fail(error)

            record = self._parse_body(response)
            logger.info(f"Fetched image for {date}: {record.title}")
            return FetchResult.ok(record)
        except FetchError as e:
            logger.error(f"Failed to fetch image for {date}: {e}")
            return FetchResult.fail(e)
        except Exception as e:
            logger.error(f"Unexpected error fetching image for {date}: {e}", exc_info=True)
            return FetchResult.fail(UnknownError(f"Unexpected error: {e}"))

    async def _fetch_previous_day(self) -> FetchResult:
        """Run the single fallback request for the day before today."""
        fallback_date = format_date(previous_day(self.today()))
        logger.info(f"Falling back to {fallback_date}")
        return await self.fetch_for_date(fallback_date)

    async def _get(
        self, client: httpx.AsyncClient, params: dict[str, str]
    ) -> httpx.Response:
        """Issue a GET against the endpoint with the API key added."""
        # The API key is left out of the log line
        logger.debug(f"GET {self.base_url} params={params}")
        return await client.get(self.base_url, params={"api_key": self.api_key, **params})

    def _parse_body(self, response: httpx.Response) -> ImageRecord:
        """Decode a successful response body into an ImageRecord.

        Args:
            response: The httpx Response object

        Returns:
            The parsed record

        Raises:
            ParseError: If the body is empty, not JSON, or not a record
        """
        if not response.content:
            raise ParseError("Empty response body")
        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(
                f"Failed to parse JSON response: {e} (body: {response.text[:200]!r})"
            ) from e
        return parse_record(payload)
