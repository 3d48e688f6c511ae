"""Settlement computation package."""

from payback.settlement.engine import (
    SETTLEMENT_EPSILON,
    apply_settlements,
    compute_balances,
    compute_settlements,
    total_owed,
)

__all__ = [
    "SETTLEMENT_EPSILON",
    "apply_settlements",
    "compute_balances",
    "compute_settlements",
    "total_owed",
]
