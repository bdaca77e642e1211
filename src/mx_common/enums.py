"""Global enums shared by the engines and the API schemas."""

from enum import Enum


class Recommendation(str, Enum):
    HOLD = "hold"
    REPRICE = "reprice"
    CANCEL = "cancel"


class ImpactModel(str, Enum):
    """Which calibrated coefficient drives the impact estimate."""
    LINEAR = "LINEAR"  # Kyle's lambda x Q
    SQUARE_ROOT = "SQUARE_ROOT"  # eta x sqrt(Q)
    NONE = "NONE"  # not enough history
