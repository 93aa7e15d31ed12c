from __future__ import annotations

from typing import Optional


class StatusOsintError(Exception):
    """Base for every failure that aborts a report run."""


class ConfigError(StatusOsintError):
    pass


class InputReadError(StatusOsintError):
    pass


class ParseError(StatusOsintError, ValueError):
    pass


class TransportError(StatusOsintError):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class StatLookupError(StatusOsintError, LookupError):
    """An expected stat counter or game entry is missing from a response."""


class FileWriteError(StatusOsintError):
    pass
