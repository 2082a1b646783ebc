"""Errors raised by the data-sharing client."""

from typing import Optional


class SharingClientError(Exception):
    """Base error for failures talking to the data-sharing platform."""


class SharingAPIError(SharingClientError):
    """The platform answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.code = code
        self.message = message
        label = f"{code}: " if code else ""
        super().__init__(f"HTTP {status_code} - {label}{message}")


class PullTimeoutError(SharingClientError):
    """The session did not finish delivering files within the pull timeout."""


class FileDecryptionError(SharingClientError):
    """A retrieved file could not be decrypted or failed its integrity check."""
