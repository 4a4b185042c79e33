# pocketpal/core/errors.py
from typing import Optional


class PocketPalError(Exception):
    """Base class for every failure the app turns into a user-facing message."""


class ValidationError(PocketPalError):
    """Invalid or missing input. Raised before any network call is made."""


class RemoteWriteError(PocketPalError):
    """The record store rejected a mutation."""


class RemoteReadError(PocketPalError):
    """A read from the store or an endpoint failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(PocketPalError):
    """The text-generation service could not produce usable content."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class UpstreamRateLimited(UpstreamError):
    status_code = 429


class UpstreamUnavailable(UpstreamError):
    """Quota exhausted (402) or the service failed (5xx)."""

    status_code = 500


class MalformedUpstreamContent(UpstreamError):
    status_code = 500
