from src.mx_common.errors import (
    InvalidLookbackError,
    InvalidQuantityError,
    InvalidUrgencyError,
)


def check_quantity(quantity: int) -> None:
    """Raise InvalidQuantityError (4001) if quantity is not positive."""
    if quantity <= 0:
        raise InvalidQuantityError(quantity)


def check_lookback(days: int) -> None:
    """Raise InvalidLookbackError (4003) if the history window is empty."""
    if days <= 0:
        raise InvalidLookbackError(days)


def check_urgency(urgency: float) -> None:
    """Raise InvalidUrgencyError (4004) if urgency is outside [0, 1]."""
    if not (0.0 <= urgency <= 1.0):
        raise InvalidUrgencyError(urgency)
