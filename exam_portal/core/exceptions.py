from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ExamPortalError(HTTPException):
    """Base error for everything the exam core raises.

    Carries an HTTP status for the API layer, a stable machine ``code`` for
    clients and a ``retryable`` hint for callers that replay requests.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "BAD_REQUEST"
    default_message: str = "Request could not be processed."
    retryable: bool = False

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message)
        self.details = details


class Unauthorized(ExamPortalError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "UNAUTHORIZED"
    default_message = "You are not allowed to perform this action."


class InvalidToken(Unauthorized):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_TOKEN"
    default_message = "Could not validate credentials."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.headers = {"WWW-Authenticate": "Bearer"}


class NotFound(ExamPortalError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found."


class InvalidState(ExamPortalError):
    status_code = status.HTTP_409_CONFLICT
    code = "INVALID_STATE"
    default_message = "Operation is not allowed in the current state."


class AlreadyCompleted(InvalidState):
    code = "ALREADY_COMPLETED"
    default_message = "This exam attempt has already been submitted."


class AttemptNotEditable(InvalidState):
    code = "ATTEMPT_NOT_EDITABLE"
    default_message = "Answers can only be recorded while the attempt is pending."


class ExamNotActive(InvalidState):
    code = "EXAM_NOT_ACTIVE"
    default_message = "Exam is not active."


class ExamWindowClosed(InvalidState):
    code = "EXAM_WINDOW_CLOSED"
    default_message = "Exam is outside its availability window."


class CertificateExists(InvalidState):
    code = "CERTIFICATE_EXISTS"
    default_message = "A certificate has already been issued for this exam."


class NotEligible(InvalidState):
    code = "NOT_ELIGIBLE"
    default_message = "Attempt is not eligible for a certificate."


class ValidationError(ExamPortalError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"
    default_message = "Request validation failed."


class StoreUnavailable(ExamPortalError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_UNAVAILABLE"
    default_message = "The data store is temporarily unavailable. Please retry."
    retryable = True
