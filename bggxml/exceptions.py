# bggxml/exceptions.py
from typing import List, Optional


class BGGException(Exception):
    """Base exception for all bggxml errors."""
    pass


class BGGNetworkError(BGGException):
    """Raised for network-related issues (e.g., connection errors, DNS or TLS failures)."""
    pass


class BGGHTTPError(BGGException):
    """Raised when BGG answers with a status other than 2xx (or 202 on a polled endpoint)."""

    def __init__(self, status: int, url: Optional[str] = None):
        self.status = status
        self.url = url
        where = f" from {url}" if url else ""
        super().__init__(f"BGG API returned HTTP {status}{where}")


class BGGTimeoutError(BGGException):
    """Raised when BGG is still processing a request after every allowed attempt."""

    def __init__(self, attempts: int, url: Optional[str] = None):
        self.attempts = attempts
        self.url = url
        super().__init__(f"Data still not ready after {attempts} attempts, giving up on {url}")


class BGGCancelledError(BGGException):
    """Raised when the caller's timeout expires while a request or retry wait is in flight."""
    pass


class BGGParseError(BGGException):
    """Raised when a response body is not well-formed XML or has an unexpected root element."""

    def __init__(self, message: str, fragment: Optional[str] = None):
        self.fragment = fragment
        if fragment:
            message = f"{message} (near: {fragment!r})"
        super().__init__(message)


class BGGDecodeError(BGGException):
    """Base class for XML that parsed fine but does not match the expected schema."""
    pass


class MissingFieldError(BGGDecodeError):
    def __init__(self, field: str, element: str):
        self.field = field
        self.element = element
        super().__init__(f"Required field '{field}' missing from <{element}>")


class InvalidNumberError(BGGDecodeError):
    def __init__(self, field: str, raw_value: str):
        self.field = field
        self.raw_value = raw_value
        super().__init__(f"Field '{field}' is not a valid number: {raw_value!r}")


class UnexpectedValueError(BGGDecodeError):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Unexpected value for '{field}': {value!r}")


class BGGAPIError(BGGException):
    """Raised for errors reported by the BGG API in an <errors> document."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        if not self.messages:
            text = "BGG API returned an error with no message"
        elif len(self.messages) == 1:
            text = f"BGG API returned an error: {self.messages[0]}"
        else:
            text = f"BGG API returned errors: {', '.join(self.messages)}"
        super().__init__(text)


class UnknownUsernameError(BGGAPIError):
    """Raised when the requested username does not exist on BGG."""
    pass


class InvalidCollectionItemTypeError(BGGAPIError):
    """Raised when BGG rejects the collection subtype filter."""
    pass


def api_error_from_messages(messages: List[str]) -> BGGAPIError:
    """Maps the messages of an <errors> document onto the most specific exception."""
    if len(messages) == 1:
        if messages[0] == "Invalid username specified":
            return UnknownUsernameError(messages)
        if messages[0] == "Invalid collection subtype":
            return InvalidCollectionItemTypeError(messages)
    return BGGAPIError(messages)
