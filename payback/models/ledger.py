"""
Core Data Models for Party Payback

These models define the schemas for everything the session stores and
everything the settlement engine consumes or produces.
They are designed to:
1. Enforce basic type and range checks at runtime
2. Keep untrusted form input (drafts) apart from trusted records
3. Be cheap to snapshot, since the engine is handed copies every call

DESIGN DECISION: Amounts and percentages are floats rounded to two
decimal places for display only. Anything finer than a cent is noise.
"""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# A percentage or amount as typed into a form: a number, a numeric
# string, a blank string, or nothing at all.
RawNumber = Optional[Union[float, int, str]]


# =============================================================================
# PARTICIPANTS
# =============================================================================

class Participant(BaseModel):
    """
    A person tracked in the shared-expense session.

    The id is assigned once on creation and never changes, so expenses
    and splits can reference it even if two people share a display name.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique participant ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    Expense details exactly as entered in the form.

    CRITICAL: This is UNTRUSTED input. Nothing here has been checked.
    It MUST go through ExpenseValidator before an Expense is built.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = ""
    amount: RawNumber = None
    payer_id: Optional[UUID] = None
    splits: dict[UUID, RawNumber] = Field(default_factory=dict)


class Expense(BaseModel):
    """
    A recorded payment made by one participant, shared by percentage.

    Only validated expenses are stored in a session: the split
    percentages sum to 100 and every id referenced existed when the
    expense was created. The settlement engine relies on that and
    does not re-check it.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="When the expense was recorded"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Total amount paid"
    )
    payer_id: UUID = Field(
        ...,
        description="Participant who paid"
    )
    splits: dict[UUID, float] = Field(
        ...,
        description="Participant ID -> percentage share of the amount"
    )

    @field_validator('splits')
    @classmethod
    def validate_non_negative_shares(cls, v: dict[UUID, float]) -> dict[UUID, float]:
        """Shares can be zero but never negative."""
        for participant_id, percentage in v.items():
            if percentage < 0:
                raise ValueError(
                    f"Split percentage for {participant_id} cannot be negative"
                )
        return v

    def share_of(self, participant_id: UUID) -> float:
        """Amount this participant consumed from the expense."""
        return self.amount * self.splits.get(participant_id, 0.0) / 100


# =============================================================================
# SETTLEMENT
# =============================================================================

class SettlementInstruction(BaseModel):
    """One participant paying another to square up balances."""
    model_config = ConfigDict(frozen=True)

    debtor_id: UUID = Field(
        ...,
        description="Participant who pays"
    )
    creditor_id: UUID = Field(
        ...,
        description="Participant who receives"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Transfer amount, rounded to cents"
    )


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a draft."""

    field: str = Field(
        ...,
        description="Which field has the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (missing, invalid_value, unknown_participant, ...)"
    )
    message: str = Field(
        ...,
        description="Human-readable message, shown to the user as-is"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="error blocks saving, warning does not"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggestion for how to fix"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating a draft.

    All issues are collected, so the user can fix everything at once
    instead of resubmitting the form once per mistake.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if any issues are errors (not just warnings)."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def messages(self) -> list[str]:
        """Error messages in the order they were found."""
        return [issue.message for issue in self.issues if issue.severity == "error"]
