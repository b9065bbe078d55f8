"""
Typed failures.

Every failure the lookup layer can produce is a WeatherError carrying an
ErrorKind, so callers can branch on the kind instead of on provider status codes.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "validation_error"
    LOCATION_NOT_FOUND = "location_not_found"
    NETWORK_FAILURE = "network_failure"
    MALFORMED_RESPONSE = "malformed_response"
    PERMISSION_DENIED_OR_UNAVAILABLE = "permission_denied_or_unavailable"
    STORAGE_READ_ERROR = "storage_read_error"


class WeatherError(RuntimeError):
    """Base class for weather lookup failures."""
    kind: ErrorKind = ErrorKind.NETWORK_FAILURE


class EmptySearchError(WeatherError):
    """Search input was empty after trimming."""
    kind = ErrorKind.VALIDATION_ERROR

    def __init__(self, message: str = "Please enter a city name."):
        super().__init__(message)


class LocationNotFound(WeatherError):
    kind = ErrorKind.LOCATION_NOT_FOUND


class NetworkFailure(WeatherError):
    """Transport failure, or a provider error other than 'not found'."""
    kind = ErrorKind.NETWORK_FAILURE


class MalformedResponse(WeatherError):
    kind = ErrorKind.MALFORMED_RESPONSE


class GeolocationUnavailable(WeatherError):
    """Permission denied, or the device cannot tell where it is."""
    kind = ErrorKind.PERMISSION_DENIED_OR_UNAVAILABLE


class StorageReadError(WeatherError):
    kind = ErrorKind.STORAGE_READ_ERROR
