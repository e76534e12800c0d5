"""
Quiz service exceptions.

Every failure raised by the quiz services is one of the classes below. The
HTTP layer turns them into JSON error responses through a single exception
handler registered in ``main.py``; services never build HTTP responses
themselves.
"""

from typing import Any, Dict, Optional


class QuizServiceException(Exception):
    """
    Base exception for all quiz service errors.

    Attributes:
        message (str): Human-readable error message
        status_code (int): HTTP status code the boundary layer should answer with
        error_code (str): Stable machine-readable error kind
        details (Dict[str, Any]): Additional error details
    """

    status_code: int = 500
    error_code: str = "InternalError"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to the error response body.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "success": False,
            "message": self.message,
            "error": self.error_code,
            "details": self.details,
        }


class NotFoundException(QuizServiceException):
    """
    Raised when a quiz, question, option, attempt or result does not exist,
    or does not belong to the referenced parent.
    """

    status_code = 404
    error_code = "NotFound"

    def __init__(self, message: str = "resource not found", resource: Optional[str] = None) -> None:
        details = {}
        if resource:
            details["resource"] = resource
        super().__init__(message, details)


class ForbiddenException(QuizServiceException):
    """
    Raised when the access guard denies the caller, or when the caller does
    not own the attempt/result it references.
    """

    status_code = 403
    error_code = "Forbidden"

    def __init__(self, message: str = "forbidden") -> None:
        super().__init__(message)


class ConflictException(QuizServiceException):
    """
    Raised when the quiz or attempt is not in a state that allows the
    operation: quiz closed, outside its time window, attempt cap reached,
    attempt still ongoing, attempt already submitted.
    """

    status_code = 409
    error_code = "Conflict"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ValidationException(QuizServiceException):
    """Raised for malformed catalog mutations or unusable import files."""

    status_code = 400
    error_code = "ValidationError"

    def __init__(self, message: str, validation_errors: Optional[Dict[str, str]] = None) -> None:
        details = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        super().__init__(message, details)


class EmptySubmissionException(QuizServiceException):
    """Raised when an attempt is finalized without a single draft answer."""

    status_code = 400
    error_code = "EmptySubmission"

    def __init__(self, message: str = "no submissions found") -> None:
        super().__init__(message)
