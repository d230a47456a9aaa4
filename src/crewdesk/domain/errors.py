"""Domain error taxonomy."""

from enum import Enum


class ErrorCode(Enum):
    """Stable error codes surfaced to callers."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_FOUND = "NOT_FOUND"
    REMOTE_FAILURE = "REMOTE_FAILURE"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class CrewdeskError(Exception):
    """Base error with a code and a user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


_AUTH_MESSAGES = {
    ErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorCode.EMAIL_ALREADY_EXISTS: "User already exists with this email",
    ErrorCode.NOT_AUTHENTICATED: "User not authenticated",
}


class AuthError(CrewdeskError):
    """Raised for invalid credentials, duplicate emails or missing sessions."""

    def __init__(self, reason: ErrorCode, message: str | None = None) -> None:
        if reason not in _AUTH_MESSAGES:
            raise ValueError(f"Not an auth error code: {reason}")
        super().__init__(code=reason, message=message or _AUTH_MESSAGES[reason])
        self.reason = reason


class NotFoundError(CrewdeskError):
    """Raised when a referenced entity id does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=f"{kind} not found")
        self.kind = kind
        self.entity_id = entity_id


class RemoteError(CrewdeskError):
    """Raised when a remote call fails or returns an unusable payload."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(code=ErrorCode.REMOTE_FAILURE, message=message)
        self.status_code = status_code
        self.detail = detail


class ValidationError(CrewdeskError):
    """Raised for malformed input to a mutation."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)
