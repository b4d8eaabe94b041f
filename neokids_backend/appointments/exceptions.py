"""
Domain exceptions for the appointments app.

Raised by the service layer and translated to DRF responses in the views.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base exception for appointment and result errors."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = {'detail': str(self)}
        if self.field:
            result['field'] = self.field
        return result


class InvalidBookingData(BookingError):
    """
    Raised when an appointment cannot be created from the given data
    (unknown patient, empty or inactive services, bad payment method).
    """


class InvalidStatusTransition(BookingError):
    """
    Raised when a status change is not allowed, e.g. skipping a lab step.
    """

    def __init__(self, *, from_status: str, to_status: str, message: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            message or f"Transition '{from_status}' -> '{to_status}' is not allowed.",
            field='status',
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result['from_status'] = self.from_status
        result['to_status'] = self.to_status
        return result


class ResultWriteError(BookingError):
    """
    Raised when an exam result cannot be written.

    ``unauthenticated`` marks the case where no actor was supplied.
    """

    def __init__(self, message: str, field: str | None = None, *, unauthenticated: bool = False):
        self.unauthenticated = unauthenticated
        super().__init__(message, field=field)
