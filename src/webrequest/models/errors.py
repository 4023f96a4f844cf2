from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .response import WebResponse


class WebRequestError(Exception):
    """Base class for every error raised by webrequest."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidUrlError(WebRequestError, ValueError):
    """Raised when a request URL is not an absolute http(s) URL."""

    def __init__(self, url: Any, reason: str | None = None):
        self.url = url
        self.reason = reason
        message = f"Invalid URL: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidParameterError(WebRequestError, ValueError):
    """Raised when a parameter has an empty name or a null value."""

    def __init__(
        self,
        message=(
            "Parameter name must be a non-empty string "
            "and its value must not be None."
        ),
        name: Any = None,
    ):
        self.name = name
        super().__init__(message)


class NetworkError(WebRequestError):
    """Raised when the transport could not complete the round trip.

    Receiving an HTTP error status is not a network error; those responses
    are returned normally. ``response`` holds a snapshot with
    ``error_message`` set and ``status_code`` 0.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        response: "WebResponse | None" = None,
    ):
        self.url = url
        self.response = response
        super().__init__(message)


class DeserializationError(WebRequestError):
    """Raised when response content cannot be converted to the requested shape.

    Attributes:
        reason: The parser or validation diagnostic.
        content: The raw response content that failed to convert.
    """

    def __init__(self, reason: str, content: str | None = None):
        self.reason = reason
        self.content = content
        super().__init__(f"Failed to deserialize response content: {reason}")
