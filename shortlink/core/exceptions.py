"""
Custom Exceptions

This module defines the error taxonomy of the link shortener.
Each exception carries the HTTP status code and the public message
used when it reaches the request boundary (see shortlink.api.errors).
"""

from typing import Optional


class LinkShortenerError(Exception):
    """Base exception for the link shortener service."""

    status_code = 500
    public_message = "Internal server error"


class InvalidRequestError(LinkShortenerError):
    """Raised when the request body is malformed."""

    status_code = 400
    public_message = "Invalid request"

    def __init__(self, reason: str = "Malformed request body"):
        self.reason = reason
        super().__init__(reason)


class LinkNotFoundError(LinkShortenerError):
    """Raised when a short code is not found in the database."""

    status_code = 404
    public_message = "URL not found"

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class PersistenceError(LinkShortenerError):
    """Raised when the storage layer is unavailable or a write fails."""

    status_code = 500
    public_message = "Could not save URL"

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        public_message: Optional[str] = None,
    ):
        self.original_error = original_error
        if public_message is not None:
            self.public_message = public_message
        super().__init__(f"Database error: {message}")


class RandomSourceUnavailable(LinkShortenerError):
    """Raised when the secure random source cannot supply bytes."""

    status_code = 500
    public_message = "Could not generate short code"

    def __init__(self, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Secure random source unavailable: {original_error}")
