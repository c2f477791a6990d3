"""
Error model for the job board API.

Every failure a service can report is a ``JobBoardError`` subclass carrying a
structured code, a human-readable message and the HTTP status the API layer
answers with.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Structured error codes returned in API error bodies."""
    INVALID_INPUT = "INVALID_INPUT"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    MISSING_ROLE_ATTRIBUTE = "MISSING_ROLE_ATTRIBUTE"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    JOB_CLOSED = "JOB_CLOSED"
    DEADLINE_PASSED = "DEADLINE_PASSED"
    DUPLICATE_APPLICATION = "DUPLICATE_APPLICATION"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    UPSTREAM_STORE_FAILURE = "UPSTREAM_STORE_FAILURE"


class JobBoardError(Exception):
    """Base exception for API errors with structured error information."""

    code: ErrorCode = ErrorCode.UPSTREAM_STORE_FAILURE
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, original_error: Optional[Exception] = None):
        """
        Initialize an error.

        Args:
            message: Human-readable error message; falls back to the class default
            original_error: The original exception if this wraps another error
        """
        self.message = message or self.default_message
        self.original_error = original_error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to the JSON body returned to clients."""
        return {
            "success": False,
            "error": {
                "code": self.code.value,
                "message": self.message,
            },
        }


class InvalidInput(JobBoardError):
    code = ErrorCode.INVALID_INPUT
    status_code = 400
    default_message = "Invalid input"


class DuplicateIdentity(JobBoardError):
    code = ErrorCode.DUPLICATE_IDENTITY
    status_code = 400
    default_message = "User already exists"


class MissingRoleAttribute(JobBoardError):
    code = ErrorCode.MISSING_ROLE_ATTRIBUTE
    status_code = 400
    default_message = "Required attributes for this role are missing"


class InvalidCredential(JobBoardError):
    code = ErrorCode.INVALID_CREDENTIAL
    status_code = 401
    default_message = "Invalid email or password"


class Forbidden(JobBoardError):
    code = ErrorCode.FORBIDDEN
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFound(JobBoardError):
    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Resource not found"


class JobClosed(JobBoardError):
    code = ErrorCode.JOB_CLOSED
    status_code = 400
    default_message = "This job is no longer accepting applications"


class DeadlinePassed(JobBoardError):
    code = ErrorCode.DEADLINE_PASSED
    status_code = 400
    default_message = "Application deadline for this job has passed"


class DuplicateApplication(JobBoardError):
    code = ErrorCode.DUPLICATE_APPLICATION
    status_code = 400
    default_message = "You have already applied for this job"


class InvalidStatusTransition(JobBoardError):
    code = ErrorCode.INVALID_STATUS_TRANSITION
    status_code = 409
    default_message = "Application status can no longer be changed"


class UpstreamStoreFailure(JobBoardError):
    code = ErrorCode.UPSTREAM_STORE_FAILURE
    status_code = 500
    default_message = "Server error"
