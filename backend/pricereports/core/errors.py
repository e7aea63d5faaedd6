"""Error taxonomy shared by every layer.

Each error carries an ``ErrorKind`` tag. The HTTP boundary maps the tag to a
status code, so callers never need to test exception class identity.
"""
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    MALFORMED_BODY = "malformed_body"
    UNSUPPORTED_VERSION = "unsupported_version"
    STORE = "store"
    UNKNOWN = "unknown"


class ReportsError(Exception):
    """Base error with a kind tag, a client-facing message and optional data."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class ValidationError(ReportsError):
    kind = ErrorKind.VALIDATION
    default_message = "Bad request: Invalid data received in body payload"


class MalformedBodyError(ReportsError):
    kind = ErrorKind.MALFORMED_BODY
    default_message = "Bad request: Invalid JSON received in body payload"


class UnsupportedVersionError(ReportsError):
    kind = ErrorKind.UNSUPPORTED_VERSION
    default_message = "Unsupported version"


class StoreError(ReportsError):
    kind = ErrorKind.STORE
    default_message = "Storage backend unavailable"


class UnknownError(ReportsError):
    kind = ErrorKind.UNKNOWN
