from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationFailed(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, error_code="VALIDATION_ERROR", details=details)


class NotFound(AppException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message=message, status_code=404, error_code="NOT_FOUND")


class AlreadyCheckedIn(AppException):
    def __init__(self, message: str = "You have already checked in today"):
        super().__init__(message=message, status_code=409, error_code="ALREADY_CHECKED_IN")


class AlreadyCheckedOut(AppException):
    def __init__(self, message: str = "You have already checked out today"):
        super().__init__(message=message, status_code=409, error_code="ALREADY_CHECKED_OUT")


class NotCheckedIn(AppException):
    def __init__(self, message: str = "No check-in recorded for this day"):
        super().__init__(message=message, status_code=400, error_code="NOT_CHECKED_IN")


class LeaveAlreadyDecided(AppException):
    def __init__(self, status: str):
        super().__init__(
            message=f"Leave request already {status}",
            status_code=409,
            error_code="LEAVE_ALREADY_DECIDED",
            details={"status": status},
        )


class LeaveOverlap(AppException):
    def __init__(self, conflicting_ids: list):
        super().__init__(
            message="Leave dates overlap with already approved leave",
            status_code=409,
            error_code="LEAVE_OVERLAP",
            details={"conflicting_request_ids": conflicting_ids},
        )


class StoreError(AppException):
    """Any persistence failure. Transient and permanent failures are not distinguished."""
    def __init__(self, message: str = "The operation could not be completed. Please try again."):
        super().__init__(message=message, status_code=503, error_code="STORE_UNAVAILABLE")


class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )
