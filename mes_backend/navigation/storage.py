"""
Best-effort persistence of the last active section.
"""
from __future__ import annotations

from typing import Optional

from mes_shared import ErrorCode, Result, get_logger, sanitize_error_message

from ..config import STORAGE_KEY
from .dom import StorageAdapter

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised by storage backends when they are disabled or full."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORAGE_UNAVAILABLE):
        super().__init__(message)
        self.code = code


class SectionStore:
    """
    Reads and writes the persisted section id.

    Storage failures never escape: they are logged at warning level and
    reported as an error `Result`, which callers treat as "no value".
    """

    def __init__(self, storage: Optional[StorageAdapter], key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Result[str]:
        if self.storage is None:
            return Result.Err(ErrorCode.STORAGE_UNAVAILABLE, "Storage is not available")
        try:
            value = self.storage.get_item(self.key)
        except Exception as exc:
            logger.warning("localStorage not available: %s", sanitize_error_message(exc, "read failed"))
            return Result.Err(_error_code(exc), sanitize_error_message(exc, "Storage read failed"))
        if not value:
            return Result.Err(ErrorCode.NOT_FOUND, f"No value stored under {self.key!r}")
        return Result.Ok(str(value))

    def save(self, section_id: str) -> Result[bool]:
        if self.storage is None:
            return Result.Err(ErrorCode.STORAGE_UNAVAILABLE, "Storage is not available")
        try:
            self.storage.set_item(self.key, section_id)
        except Exception as exc:
            logger.warning("localStorage not available: %s", sanitize_error_message(exc, "write failed"))
            return Result.Err(_error_code(exc), sanitize_error_message(exc, "Storage write failed"))
        return Result.Ok(True)


def _error_code(exc: Exception) -> ErrorCode:
    return exc.code if isinstance(exc, StorageError) else ErrorCode.STORAGE_UNAVAILABLE
