from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SYSTEM = "system"


class TrackerError(Exception):
    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code or 500
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message} (HTTP {self.status_code})"


class ValidationError(TrackerError):
    def __init__(self, message: str = "Invalid request data") -> None:
        super().__init__(message, ErrorCategory.VALIDATION, 400)


class NotFoundError(TrackerError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, ErrorCategory.NOT_FOUND, 404)
