# src/taskboard/errors.py

"""Exception hierarchy shared by the store client, the pipeline and the CLI."""

from __future__ import annotations

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class AppError(Exception):
    """Base exception for app-specific failures."""


class ConfigError(ValueError, AppError):
    """Missing or invalid configuration. Fatal at startup."""


class StoreError(AppError):
    """The remote store rejected a request or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class CountUnavailableError(StoreError):
    """The store answered without an exact row count."""


def error_message(exc: BaseException) -> str:
    """Text published to the error cell for a failed operation."""
    msg = str(exc).strip()
    return msg or UNKNOWN_ERROR_MESSAGE
