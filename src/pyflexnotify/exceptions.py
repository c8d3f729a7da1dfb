"""Custom exception hierarchy for pyflexnotify."""

from __future__ import annotations


class FlexNotifyError(Exception):
    """Base exception for all pyflexnotify errors."""


class FlexConfigError(FlexNotifyError):
    """Invalid or missing configuration."""


class FlexValidationError(FlexNotifyError, ValueError):
    """Malformed caller input (coordinates, radius, city).

    Raised synchronously by registration helpers. Never retried.
    """


class UpstreamError(FlexNotifyError):
    """Vehicle feed failure (network, non-200, timeout or malformed payload).

    All causes collapse into this one kind because the search loop
    recovers from every one of them the same way: it retries at the
    next poll.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class PushDeliveryError(FlexNotifyError):
    """The push transport rejected a notification payload."""


class PushSubscriptionGoneError(PushDeliveryError):
    """The push endpoint is expired or unknown (HTTP 404/410).

    Callers should forget the endpoint rather than retry.
    """

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(f"Push subscription gone: {endpoint}")
