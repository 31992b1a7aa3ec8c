"""APOD client - fetch the Astronomy Picture of the Day with a one-day fallback."""

__version__ = "0.1.0"

from apod_client.api_client import (
    ApodAPIClient,
    FetchError,
    HttpError,
    NetworkError,
    NoImageForDate,
    ParseError,
    UnknownError,
)
from apod_client.controller import DailyImageController
from apod_client.models import Error, FetchResult, ImageRecord, Loading, LoadState, Success
from apod_client.notifier import Notifier

__all__ = [
    "ApodAPIClient",
    "FetchError",
    "HttpError",
    "NetworkError",
    "NoImageForDate",
    "ParseError",
    "UnknownError",
    "DailyImageController",
    "Error",
    "FetchResult",
    "ImageRecord",
    "Loading",
    "LoadState",
    "Success",
    "Notifier",
]
