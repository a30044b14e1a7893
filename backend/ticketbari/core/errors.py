"""
Domain error taxonomy.

Every error is terminal for the request and maps straight to an HTTP
response, so each one is an HTTPException with a fixed status code.
"""

from typing import Any, Optional

from fastapi import HTTPException, status


class TicketBariError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: Any = "Internal error"

    def __init__(self, detail: Any = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class AuthenticationError(TicketBariError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "unauthorized access"

    def __init__(self, detail: Any = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(TicketBariError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "forbidden access"


class NotFoundError(TicketBariError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InvalidStateError(TicketBariError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Illegal state transition"


class LimitReachedError(TicketBariError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "limit_reached"


class SeatConflictError(TicketBariError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, seats: list[str]):
        self.seats = seats
        super().__init__(f"Seats already taken: {', '.join(seats)}")


class InsufficientQuantityError(TicketBariError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough tickets. Requested: {requested}, Available: {available}"
        )


class AlreadyAppliedError(TicketBariError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Payment already applied to this booking"


class ValidationError(TicketBariError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class UpstreamError(TicketBariError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment gateway unavailable"
