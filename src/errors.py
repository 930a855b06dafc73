"""Domain errors raised by the capacity ledger, guest validation and RSVP flow.

Every error carries a code and a user-safe message. Routers catch
``DomainError`` at the boundary of the action and turn it into an HTTP
response with ``to_http_exception``.
"""

from enum import Enum

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Domain error codes."""

    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    LINK_UNAUTHORIZED = "LINK_UNAUTHORIZED"
    RSVP_PERIOD_CLOSED = "RSVP_PERIOD_CLOSED"
    NOT_FOUND = "NOT_FOUND"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_detail(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class FieldError(DomainError):
    """A domain error scoped to a single input field."""

    status_code = 422

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["errors"] = {self.field: self.message}
        return detail


class CapacityExceededError(FieldError):
    """Raised when a seat allocation does not fit in the remaining capacity."""

    code = ErrorCode.CAPACITY_EXCEEDED

    def __init__(self, remaining: int, field: str = "seats_reserved") -> None:
        super().__init__(
            field,
            f"Capacity reached. Only {remaining} seat(s) remaining.",
        )
        self.remaining = remaining

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["remaining_seats"] = self.remaining
        return detail


class ValidationFailedError(FieldError):
    """Raised when a required field is missing or malformed."""

    code = ErrorCode.VALIDATION_FAILED


class LinkUnauthorizedError(DomainError):
    """Raised when a signed RSVP link is invalid, tampered with or expired."""

    code = ErrorCode.LINK_UNAUTHORIZED
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "This link is invalid or has expired.") -> None:
        super().__init__(message)


class RsvpPeriodClosedError(DomainError):
    """Raised when a response is submitted after the RSVP deadline."""

    code = ErrorCode.RSVP_PERIOD_CLOSED
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self) -> None:
        super().__init__("The RSVP period for this event has ended.")


class NotFoundError(DomainError):
    """Unknown slug, unknown guest, or a draft invitation seen without privilege."""

    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self) -> None:
        super().__init__("Not found")


def to_http_exception(error: DomainError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())
