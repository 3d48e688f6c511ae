"""Validation package."""

from payback.validation.validator import (
    ExpenseValidationError,
    ExpenseValidator,
    InvalidParticipantError,
    LedgerError,
    parse_number,
)

__all__ = [
    "ExpenseValidationError",
    "ExpenseValidator",
    "InvalidParticipantError",
    "LedgerError",
    "parse_number",
]
