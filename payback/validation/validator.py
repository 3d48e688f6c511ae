"""
Expense Entry Validation

DESIGN DECISION: Validation happens at the point of data entry, and
only there. Once an Expense exists it is trusted: the settlement engine
never re-checks that splits sum to 100.

Checks on an expense draft:
- Description present
- Amount present, numeric, positive and below the configured maximum
- Payer present and on the roster
- Every percentage numeric, non-negative and keyed by a roster participant
- Percentages total 100 (within tolerance)
- Enough participants exist to share anything

IMPORTANT: Validation NEVER silently fixes issues.
Every problem is reported so the user can correct the form.
"""

import math
from collections.abc import Collection
from typing import Optional
from uuid import UUID

from payback.config import LedgerSettings, get_settings
from payback.models.ledger import (
    Expense,
    ExpenseDraft,
    RawNumber,
    ValidationIssue,
    ValidationResult,
)


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidParticipantError(LedgerError):
    """Participant name is empty or too long."""
    pass


class ExpenseValidationError(LedgerError):
    """An expense draft failed validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.messages) or "Invalid expense")


def parse_number(value: RawNumber) -> Optional[float]:
    """
    Parse a number as typed into a form.

    Returns None for missing, blank or non-numeric input.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class ExpenseValidator:
    """
    Validates participant names and expense drafts against the live roster.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        """
        Initialize validator.

        Args:
            settings: Ledger settings. Defaults to the cached app settings.
        """
        self._settings = settings or get_settings().ledger

    def validate_participant_name(self, name: str) -> str:
        """
        Check a display name and return it stripped.

        Raises:
            InvalidParticipantError: If the name is blank or too long
        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidParticipantError("Please enter a name")
        if len(cleaned) > self._settings.max_name_length:
            raise InvalidParticipantError(
                f"Name is too long (max {self._settings.max_name_length} characters)"
            )
        return cleaned

    def validate(
        self,
        draft: ExpenseDraft,
        participant_ids: Collection[UUID],
    ) -> ValidationResult:
        """
        Validate an expense draft.

        Args:
            draft: Form input
            participant_ids: Ids of everyone currently on the roster

        Returns:
            ValidationResult listing every issue found
        """
        issues = []

        if len(participant_ids) < self._settings.min_participants_for_expense:
            issues.append(ValidationIssue(
                field="participants",
                issue_type="too_few",
                message=(
                    f"Add at least {self._settings.min_participants_for_expense} "
                    "friends first!"
                ),
            ))

        issues.extend(self._validate_description(draft.description))
        issues.extend(self._validate_amount(draft.amount))
        issues.extend(self._validate_payer(draft.payer_id, participant_ids))
        issues.extend(self._validate_splits(draft.splits, participant_ids))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(is_valid=is_valid, issues=issues)

    def build_expense(
        self,
        draft: ExpenseDraft,
        participant_ids: Collection[UUID],
    ) -> Expense:
        """
        Turn a draft into a trusted Expense.

        Blank percentages become 0.

        Raises:
            ExpenseValidationError: If the draft has any errors
        """
        result = self.validate(draft, participant_ids)
        if not result.is_valid:
            raise ExpenseValidationError(result)

        return Expense(
            description=draft.description,
            amount=parse_number(draft.amount),
            payer_id=draft.payer_id,
            splits={
                participant_id: parse_number(value) or 0.0
                for participant_id, value in draft.splits.items()
            },
        )

    def _validate_description(self, description: str) -> list[ValidationIssue]:
        issues = []
        if not description or not description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Please enter a description",
            ))
        elif len(description) > self._settings.max_description_length:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message=(
                    f"Description is too long "
                    f"(max {self._settings.max_description_length} characters)"
                ),
            ))
        return issues

    def _validate_amount(self, raw_amount: RawNumber) -> list[ValidationIssue]:
        amount = parse_number(raw_amount)
        if amount is None:
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter a valid amount",
            )]
        if not math.isfinite(amount) or amount <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            )]
        max_amount = self._settings.max_expense_amount
        if amount > max_amount:
            return [ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"Amount ({self._settings.currency_symbol}{amount:,.2f}) seems unusually high",
                suggested_fix=(
                    f"Expenses are limited to "
                    f"{self._settings.currency_symbol}{max_amount:,.2f}"
                ),
            )]
        return []

    def _validate_payer(
        self,
        payer_id: Optional[UUID],
        participant_ids: Collection[UUID],
    ) -> list[ValidationIssue]:
        if payer_id is None:
            return [ValidationIssue(
                field="payer_id",
                issue_type="missing",
                message="Please choose who paid",
            )]
        if payer_id not in participant_ids:
            return [ValidationIssue(
                field="payer_id",
                issue_type="unknown_participant",
                message="The selected payer is no longer in the group",
                suggested_fix="Choose someone from the current list of friends",
            )]
        return []

    def _validate_splits(
        self,
        splits: dict[UUID, RawNumber],
        participant_ids: Collection[UUID],
    ) -> list[ValidationIssue]:
        """
        Check each share, then the total.

        The total is only checked when every share parsed, otherwise
        the user would get a misleading "must total 100%" on top of the
        real problem.
        """
        issues = []
        total = 0.0
        all_parsed = True

        for participant_id, raw_value in splits.items():
            if participant_id not in participant_ids:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="unknown_participant",
                    message="Split includes someone who is no longer in the group",
                ))
                all_parsed = False
                continue

            if raw_value is None or (isinstance(raw_value, str) and not raw_value.strip()):
                # Blank field means no share
                continue

            value = parse_number(raw_value)
            if value is None or not math.isfinite(value):
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="invalid_value",
                    message=f"Split percentage '{raw_value}' is not a number",
                ))
                all_parsed = False
            elif value < 0:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="invalid_value",
                    message="Split percentages cannot be negative",
                ))
                all_parsed = False
            else:
                total += value

        if all_parsed and abs(total - 100) >= self._settings.split_tolerance:
            issues.append(ValidationIssue(
                field="splits",
                issue_type="bad_total",
                message="Split percentages must total 100%",
                suggested_fix=f"Currently {total:g}%",
            ))

        return issues
