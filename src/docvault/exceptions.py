"""Error taxonomy shared by the service layer and the HTTP surface.

Every failure that reaches a client is an :class:`AppError`. It carries a
machine code, a severity tier (used only to pick the log level), the message
shown to the user, optional structured details and the original exception.
The original exception is logged but never serialized.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    AUTH_REQUIRED = "AUTH_REQUIRED"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_INPUT = "INVALID_INPUT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    NOT_FOUND = "NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.AUTH_REQUIRED: 401,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.FILE_TOO_LARGE: 400,
    ErrorCode.INVALID_FILE_TYPE: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.NETWORK_ERROR: 502,
}


class AppError(Exception):
    """Base class for errors that are reported to the client as JSON."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    severity: ErrorSeverity = ErrorSeverity.MEDIUM

    def __init__(
        self,
        user_message: str,
        *,
        code: ErrorCode | None = None,
        severity: ErrorSeverity | None = None,
        details: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        if code is not None:
            self.code = code
        if severity is not None:
            self.severity = severity
        self.details = details
        self.original_error = original_error
        # set by the error reporter so the HTTP handler does not log twice
        self.reported = False

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE.get(self.code, 500)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.user_message, "code": str(self.code)}
        if self.details:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!s}, message={self.user_message!r})"


class AuthError(AppError):
    code = ErrorCode.AUTH_REQUIRED


class UnauthorizedError(AppError):
    code = ErrorCode.UNAUTHORIZED
    severity = ErrorSeverity.HIGH


class ValidationError(AppError):
    code = ErrorCode.INVALID_INPUT
    severity = ErrorSeverity.LOW


class FileTooLargeError(ValidationError):
    code = ErrorCode.FILE_TOO_LARGE


class InvalidFileTypeError(ValidationError):
    code = ErrorCode.INVALID_FILE_TYPE


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND
    severity = ErrorSeverity.LOW


class NetworkError(AppError):
    code = ErrorCode.NETWORK_ERROR


class ServerError(AppError):
    code = ErrorCode.SERVER_ERROR
    severity = ErrorSeverity.HIGH


class StorageError(ServerError):
    code = ErrorCode.STORAGE_ERROR


class DatabaseError(ServerError):
    code = ErrorCode.DATABASE_ERROR


__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "STATUS_BY_CODE",
    "AppError",
    "AuthError",
    "UnauthorizedError",
    "ValidationError",
    "FileTooLargeError",
    "InvalidFileTypeError",
    "NotFoundError",
    "NetworkError",
    "ServerError",
    "StorageError",
    "DatabaseError",
]
