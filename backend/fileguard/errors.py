"""Business rule violations raised by the policy and upload services.

Every failure the services detect is a ``BusinessRuleViolation``; the
``code`` tells callers which rule was broken. Routes never catch these:
the handler registered in ``fileguard.main`` turns them into JSON errors.
"""
from enum import Enum


class ErrorCode(str, Enum):
    INVALID_EXTENSION = "INVALID_EXTENSION"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DUPLICATE_IN_FIXED = "DUPLICATE_IN_FIXED"
    DUPLICATE_IN_CUSTOM = "DUPLICATE_IN_CUSTOM"
    NOT_FOUND = "NOT_FOUND"
    EMPTY_FILE = "EMPTY_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_FILENAME = "INVALID_FILENAME"
    MISSING_EXTENSION = "MISSING_EXTENSION"
    BLOCKED_EXTENSION = "BLOCKED_EXTENSION"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
    UNREADABLE = "UNREADABLE"


_STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.UNREADABLE: 404,
    ErrorCode.DUPLICATE_IN_FIXED: 409,
    ErrorCode.DUPLICATE_IN_CUSTOM: 409,
    ErrorCode.FILE_TOO_LARGE: 413,
    ErrorCode.STORAGE_WRITE_FAILED: 500,
}


class BusinessRuleViolation(Exception):
    """Raised when an operation breaks an extension-policy or upload rule."""

    def __init__(self, code: ErrorCode, message: str, extension: str | None = None):
        self.code = code
        self.message = message
        self.extension = extension
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return _STATUS_BY_CODE.get(self.code, 400)

    def to_dict(self) -> dict:
        body = {"detail": self.message, "code": self.code.value}
        if self.extension is not None:
            body["extension"] = self.extension
        return body
