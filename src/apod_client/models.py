"""Data models for the APOD client."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ImageRecord:
    """A single day's image record as returned by the APOD endpoint."""

    date: str
    title: str
    explanation: str
    url: str
    hd_url: str | None = None
    media_type: str = ""
    service_version: str = ""

    def to_json(self) -> dict[str, Any]:
        """Return the record using the endpoint's field names."""
        payload: dict[str, Any] = {
            "date": self.date,
            "title": self.title,
            "explanation": self.explanation,
            "url": self.url,
            "media_type": self.media_type,
            "service_version": self.service_version,
        }
        if self.hd_url is not None:
            payload["hdurl"] = self.hd_url
        return payload


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a fetch: either a record or the error that prevented it."""

    success: bool
    record: ImageRecord | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        """Validate fetch result."""
        if not self.success and self.error is None:
            raise ValueError("Failed fetch must have an error")

    @classmethod
    def ok(cls, record: ImageRecord) -> "FetchResult":
        return cls(success=True, record=record)

    @classmethod
    def fail(cls, error: Exception) -> "FetchResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class Loading:
    """A fetch is in flight."""


@dataclass(frozen=True)
class Success:
    """The latest load produced a record."""

    record: ImageRecord


@dataclass(frozen=True)
class Error:
    """The latest load failed."""

    message: str

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("Error state must carry a message")


LoadState = Loading | Success | Error
