"""Pytest configuration and shared fixtures."""

from datetime import date
from typing import Any

import pytest

from apod_client.api_client import APOD_BASE_URL, ApodAPIClient
from apod_client.models import ImageRecord

# Fixed "today" for fallback tests; the fallback date is the day before
TODAY = date(2024, 5, 2)
YESTERDAY = "2024-05-01"


def apod_url(api_key: str, day: str | None = None) -> str:
    """Build the request URL the client is expected to call."""
    url = f"{APOD_BASE_URL}?api_key={api_key}"
    if day is not None:
        url += f"&date={day}"
    return url


@pytest.fixture
def api_key() -> str:
    """Return a fake API key for testing."""
    return "test-key"


@pytest.fixture
def record_payload() -> dict[str, Any]:
    """Return a JSON body for a successful response, without hdurl."""
    return {
        "date": "2024-05-01",
        "title": "Nebula",
        "explanation": "A cloud of gas and dust.",
        "url": "http://x/img.jpg",
        "media_type": "image",
        "service_version": "v1",
    }


@pytest.fixture
def record() -> ImageRecord:
    """Return the record matching record_payload."""
    return ImageRecord(
        date="2024-05-01",
        title="Nebula",
        explanation="A cloud of gas and dust.",
        url="http://x/img.jpg",
        hd_url=None,
        media_type="image",
        service_version="v1",
    )


@pytest.fixture
def apod_client(api_key: str) -> ApodAPIClient:
    """Return a client whose local date is pinned to TODAY."""
    return ApodAPIClient(api_key, today=lambda: TODAY)
