"""Unified error codes and custom exceptions.

Error code ranges:
  4xxx: Invalid input (rejected before any computation)
  9xxx: System

Missing or inconsistent market data is never an error; it is reported
through sentinel values (-1, book_available=False, empty depth levels).
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 4xxx: Invalid input ---

class InvalidQuantityError(AppError):
    def __init__(self, quantity: int) -> None:
        super().__init__(4001, f"Quantity must be positive, got {quantity}", 422)


class InvalidOrderError(AppError):
    def __init__(self, order_id: int, detail: str) -> None:
        super().__init__(4002, f"Malformed order {order_id}: {detail}", 422)


class InvalidLookbackError(AppError):
    def __init__(self, days: int) -> None:
        super().__init__(4003, f"Lookback window must be positive, got {days} days", 422)


class InvalidUrgencyError(AppError):
    def __init__(self, urgency: float) -> None:
        super().__init__(4004, f"Urgency must be within [0, 1], got {urgency}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
