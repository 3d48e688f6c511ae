"""
Data Models Package

This package contains all Pydantic models used in Party Payback.
"""

from payback.models.ledger import (
    Expense,
    ExpenseDraft,
    Participant,
    SettlementInstruction,
    ValidationIssue,
    ValidationResult,
)
from payback.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Ledger models
    "Expense",
    "ExpenseDraft",
    "Participant",
    "SettlementInstruction",
    "ValidationIssue",
    "ValidationResult",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
