"""Custom exceptions for pyecoflow library."""

from __future__ import annotations


class EcoFlowError(Exception):
    """Base exception for all EcoFlow errors."""


class RemoteError(EcoFlowError):
    """Exception raised when the EcoFlow API rejects a request.

    The response can arrive in one of two envelope shapes, so the error keeps
    the untouched response text rather than a parsed structure.

    Attributes:
        raw_body: Response body exactly as received.
        status: HTTP status code of the response.
    """

    def __init__(self, raw_body: str, status: int | None = None) -> None:
        """Initialize RemoteError.

        Args:
            raw_body: Response body exactly as received.
            status: Optional HTTP status code of the response.
        """
        super().__init__(f"Invalid response: {raw_body}")
        self.raw_body = raw_body
        self.status = status


class ResponseDecodeError(EcoFlowError):
    """Exception raised when a response body matches neither envelope shape.

    Attributes:
        raw_body: Response body exactly as received.
    """

    def __init__(self, message: str = "", raw_body: str = "") -> None:
        """Initialize ResponseDecodeError.

        Args:
            message: Error message.
            raw_body: Response body exactly as received.
        """
        super().__init__(message)
        self.raw_body = raw_body
