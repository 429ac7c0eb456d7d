"""Error hierarchy for the recipe box.

Every error carries a code, a short human-readable message, a category and the
HTTP status the API answers with. Read failures never raise (the stores fall
back to an empty collection); write failures surface as StoreWriteError.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class RezeptboxError(Exception):
    """Base exception for all recipe box errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
            }
        }


class NotFoundError(RezeptboxError):
    """The operation targets a key that does not exist."""

    def __init__(self, kind: str, key: str):
        super().__init__(
            f"{kind} '{key}' not found",
            f"{kind.upper()}_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND,
            404,
        )
        self.kind = kind
        self.key = key


class DuplicateError(RezeptboxError):
    """Create or rename collides with an existing unique key."""

    def __init__(self, kind: str, key: str):
        super().__init__(
            f"{kind} '{key}' already exists",
            f"{kind.upper()}_EXISTS",
            ErrorCategory.CONFLICT,
            400,
        )
        self.kind = kind
        self.key = key


class ValidationError(RezeptboxError):
    def __init__(self, message: str, field: str):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400,
        )
        self.field = field


class StoreWriteError(RezeptboxError):
    """A store file could not be written; the change was not persisted."""

    def __init__(self, path, reason: str):
        super().__init__(
            f"could not write {path}: {reason}",
            "STORE_WRITE_FAILED",
            ErrorCategory.STORAGE,
            500,
        )
        self.path = path
