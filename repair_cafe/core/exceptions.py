# repair_cafe/core/exceptions.py
"""
Exception hierarchy for the repair cafe service.

Services raise these; the handlers in `repair_cafe.core.error_handlers`
turn them into `{"success": false, "message": ...}` responses.
"""

from typing import Optional


class RepairCafeError(Exception):
    """Base exception for all business-rule failures."""

    status_code = 500
    default_error_code = "REPAIR_CAFE_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)


class UnauthorizedError(RepairCafeError):
    """Missing or invalid session or management token."""

    status_code = 401
    default_error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(message, **kwargs)


class ForbiddenError(RepairCafeError):
    """Authenticated, but the role or ownership does not allow the action."""

    status_code = 403
    default_error_code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", **kwargs):
        super().__init__(message, **kwargs)


class NotFoundError(RepairCafeError):
    status_code = 404
    default_error_code = "NOT_FOUND"


class ConflictError(RepairCafeError):
    """Duplicate registration, full event and similar clashes."""

    status_code = 409
    default_error_code = "CONFLICT"


class InvalidStateError(RepairCafeError):
    """The operation is not valid for the record's current status."""

    status_code = 409
    default_error_code = "INVALID_STATE"


class ValidationError(RepairCafeError):
    status_code = 400
    default_error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details=details, **kwargs)
