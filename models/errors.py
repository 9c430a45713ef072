"""Error types raised by the fetch, format and delivery services."""

from __future__ import annotations

from typing import Optional


class AqiNotifyError(Exception):
    """Base class for every failure the dispatcher knows how to report."""


class ConfigurationError(AqiNotifyError):
    """A required credential or setting is missing or malformed."""


class FetchError(AqiNotifyError):
    """The air-quality provider could not be reached or answered with a bad HTTP status."""


class ApiStatusError(AqiNotifyError):
    """The provider answered but flagged the request as failed."""


class SchemaError(AqiNotifyError):
    """The provider payload is missing required structure."""


class InvalidIndexError(AqiNotifyError):
    """The index is absent, not numeric, or negative ("no data")."""


class EmptyMessageError(AqiNotifyError):
    """Refusing to deliver an empty notification."""


class DeliveryError(AqiNotifyError):
    """The messaging provider rejected the notification."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
