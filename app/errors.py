"""
Typed failures raised by route handlers.

Each failure carries its HTTP status and client-facing message as fields;
the request pipeline is the only place that turns them into responses.
"""

from __future__ import annotations

from werkzeug.exceptions import HTTPException


class OrderServiceError(Exception):
    """Base failure with an attached HTTP status."""

    status = 500

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ValidationError(OrderServiceError):
    """Missing or malformed input; never retried."""

    status = 400


class NotFoundError(OrderServiceError):
    status = 404


class InjectedFailure(OrderServiceError):
    """Deliberate chaos-mode fault; transient, callers may retry."""

    status = 503


class ProcessingError(OrderServiceError):
    """Random simulated fault during normal order processing."""

    status = 500


def describe_error(exc: BaseException) -> tuple[int, str]:
    """Return ``(status, message)`` for any exception reaching the pipeline."""
    if isinstance(exc, OrderServiceError):
        return exc.status, exc.message
    if isinstance(exc, HTTPException):
        return exc.code or 500, exc.name
    return 500, str(exc) or "Internal Server Error"
