"""Typed errors raised by the service and store layers.

Each error carries the HTTP status the API layer renders it with, so the
routers never translate business failures themselves.
"""

from pydantic import ValidationError


class ServiceError(Exception):
    """Base class for every failure surfaced by a service operation."""

    status_code: int = 500
    kind: str = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404
    kind = "not_found"


class ConflictError(ServiceError):
    status_code = 409
    kind = "conflict"


class QuotaExceededError(ServiceError):
    status_code = 403
    kind = "quota_exceeded"


class UnauthorizedError(ServiceError):
    status_code = 401
    kind = "unauthorized"


class ForbiddenError(ServiceError):
    status_code = 403
    kind = "forbidden"


class InvalidInputError(ServiceError):
    status_code = 400
    kind = "validation"

    @classmethod
    def from_validation(cls, error: ValidationError) -> "InvalidInputError":
        """Build from the first problem reported by a pydantic ValidationError."""
        details = error.errors()[0]
        field = ".".join(str(part) for part in details["loc"])
        return cls(f"{field}: {details['msg']}" if field else details["msg"])


class InternalServiceError(ServiceError):
    status_code = 500
    kind = "internal"
