"""Filestore error types.

Every error raised while handling a request derives from ``FileStoreError``
and carries the HTTP status it maps to. The API layer renders them as
plain-text responses.
"""

from __future__ import annotations


class FileStoreError(Exception):
    """Base error for request handling."""

    code: str = "internal_error"
    message: str = "Internal server error"
    status_code: int = 500

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class UnauthorizedError(FileStoreError):
    """Missing, malformed or unknown credentials."""

    code = "unauthorized"
    message = "Unauthorized"
    status_code = 401


class MalformedRequestError(FileStoreError):
    """Unparseable body or rejected filename/path."""

    code = "malformed_request"
    message = "Bad request"
    status_code = 400


class NotFoundError(FileStoreError):
    code = "not_found"
    message = "404 page not found"
    status_code = 404


class StorageError(FileStoreError):
    """Directory/file creation or write failure."""

    code = "storage_error"
    message = "Storage error"
    status_code = 500


class ConfigError(Exception):
    """Configuration could not be loaded. Fatal at startup."""
