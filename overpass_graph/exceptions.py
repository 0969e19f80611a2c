"""
Overpass client errors

Every failure of a query surfaces as one of these, with the underlying
cause chained as __cause__
"""

from typing import Optional


class OverpassError(Exception):
    """Base class for all errors raised by the client"""


class TransportError(OverpassError):
    """The request could not be completed or its body could not be read"""

    def __init__(self, cause: Exception):
        super().__init__(f"http error: {cause}")
        self.cause = cause


class ServerError(OverpassError):
    """The server answered with a non-success status code"""

    def __init__(self, status_code: int, reason: str = "", body: bytes = b""):
        status = f"{status_code} {reason}".strip()
        super().__init__(f"overpass engine error: {status}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


class DecodeError(OverpassError):
    """The response body is not a valid or consistent Overpass document"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(f"overpass engine error: {message}")
        self.cause = cause
