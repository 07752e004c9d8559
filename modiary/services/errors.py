"""Domain errors raised by the service layer."""

from __future__ import annotations


class ModiaryError(Exception):
    """Base class for errors the host layer reports to the user."""


class BackupFormatError(ModiaryError):
    pass


class CalendarImportError(ModiaryError):
    pass


class NotFoundError(ModiaryError):
    pass


__all__ = ["ModiaryError", "BackupFormatError", "CalendarImportError", "NotFoundError"]
