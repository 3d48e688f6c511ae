"""
Ledger Session

This module owns the state of one running session: who is in the group
and which expenses have been recorded. It defines the only operations
that change that state:
1. Add participant
2. Remove participant (cascades to the expenses they paid)
3. Add expense (validated first)

DESIGN DECISION: The session enforces the boundaries:
- Nothing reaches the expense list without passing validation
- Every mutation is logged
- Settlements are recomputed from a snapshot on demand, never cached
"""

import html
from typing import Optional
from uuid import UUID

from payback.activity import ActivityLogger
from payback.config import LedgerSettings, get_settings
from payback.models.ledger import (
    Expense,
    ExpenseDraft,
    Participant,
    SettlementInstruction,
)
from payback.settlement import compute_balances, compute_settlements
from payback.validation import (
    ExpenseValidationError,
    ExpenseValidator,
    InvalidParticipantError,
    LedgerError,
)


UNKNOWN_PARTICIPANT_NAME = "(removed)"


class ParticipantNotFoundError(LedgerError):
    """No participant with this id is on the roster."""
    pass


class LedgerSession:
    """
    In-memory store for one group of friends.

    Participants and expenses are kept in insertion order. Settlement
    tie-breaks depend on roster order, so it is never re-sorted.
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[ExpenseValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._settings = settings or get_settings().ledger
        self._validator = validator or ExpenseValidator(self._settings)
        self._activity_logger = activity_logger or ActivityLogger()
        self._participants: list[Participant] = []
        self._expenses: list[Expense] = []

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    @property
    def participants(self) -> tuple[Participant, ...]:
        return tuple(self._participants)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Copies of the stored expenses; editing them changes nothing here."""
        return tuple(expense.model_copy(deep=True) for expense in self._expenses)

    @property
    def participant_ids(self) -> list[UUID]:
        return [participant.id for participant in self._participants]

    @property
    def can_add_expenses(self) -> bool:
        """Whether enough people exist to share an expense."""
        return len(self._participants) >= self._settings.min_participants_for_expense

    def get_participant(self, participant_id: UUID) -> Participant:
        """
        Look up a participant by id.

        Raises:
            ParticipantNotFoundError: If nobody on the roster has this id
        """
        for participant in self._participants:
            if participant.id == participant_id:
                return participant
        raise ParticipantNotFoundError(f"No participant with id {participant_id}")

    def participant_name(self, participant_id: UUID) -> str:
        """Display name for an id, or a placeholder if they were removed."""
        try:
            return self.get_participant(participant_id).name
        except ParticipantNotFoundError:
            return UNKNOWN_PARTICIPANT_NAME

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_participant(self, name: str) -> Participant:
        """
        Add someone to the group.

        Raises:
            InvalidParticipantError: If the name is blank or too long
        """
        try:
            cleaned = self._validator.validate_participant_name(name)
        except InvalidParticipantError as e:
            self._activity_logger.log_participant_rejected(name or "", str(e))
            raise

        participant = Participant(name=cleaned)
        self._participants.append(participant)
        self._activity_logger.log_participant_added(participant.id, participant.name)
        return participant

    def remove_participant(self, participant_id: UUID) -> list[Expense]:
        """
        Remove someone, along with every expense they paid.

        Expenses paid by others that include this participant in their
        split are kept. Their share is ignored when settling up.

        Returns:
            The expenses removed by the cascade

        Raises:
            ParticipantNotFoundError: If nobody on the roster has this id
        """
        participant = self.get_participant(participant_id)

        removed = [e for e in self._expenses if e.payer_id == participant_id]
        self._participants = [p for p in self._participants if p.id != participant_id]
        self._expenses = [e for e in self._expenses if e.payer_id != participant_id]

        self._activity_logger.log_participant_removed(
            participant_id=participant_id,
            name=participant.name,
            removed_expense_ids=[e.id for e in removed],
        )
        return [expense.model_copy(deep=True) for expense in removed]

    def add_expense(self, draft: ExpenseDraft) -> Expense:
        """
        Validate a draft and record it.

        Raises:
            ExpenseValidationError: If the draft has any errors. The
                                    session is left unchanged.
        """
        try:
            expense = self._validator.build_expense(draft, self.participant_ids)
        except ExpenseValidationError as e:
            self._activity_logger.log_expense_rejected(
                [issue.model_dump() for issue in e.result.issues]
            )
            raise

        self._expenses.append(expense)
        self._activity_logger.log_expense_added(
            expense_id=expense.id,
            description=expense.description,
            amount=expense.amount,
            payer_id=expense.payer_id,
        )
        return expense.model_copy(deep=True)

    # =========================================================================
    # SETTLEMENT
    # =========================================================================

    def orphaned_split_ids(self) -> list[UUID]:
        """Split entries that point at participants no longer on the roster."""
        roster = set(self.participant_ids)
        orphans = []
        for expense in self._expenses:
            for participant_id in expense.splits:
                if participant_id not in roster and participant_id not in orphans:
                    orphans.append(participant_id)
        return orphans

    def balances(self) -> dict[UUID, float]:
        """Net position of everyone on the roster."""
        return compute_balances(self.participant_ids, self.expenses)

    def settlements(self) -> list[SettlementInstruction]:
        """Transfers that square everyone up, computed fresh from the current state."""
        orphans = self.orphaned_split_ids()
        if orphans:
            self._activity_logger.log_orphaned_splits(orphans)

        instructions = compute_settlements(
            self.participant_ids,
            self.expenses,
            epsilon=self._settings.settlement_epsilon,
        )
        self._activity_logger.log_settlements_computed(
            instruction_count=len(instructions),
            total_transferred=sum(i.amount for i in instructions),
        )
        return instructions

    def describe(self, instruction: SettlementInstruction) -> str:
        """Plain-text rendering, e.g. "Bob owes $50.00 to Alice"."""
        return (
            f"{self.participant_name(instruction.debtor_id)} owes "
            f"{self._settings.currency_symbol}{instruction.amount:.2f} to "
            f"{self.participant_name(instruction.creditor_id)}"
        )

    def describe_html(self, instruction: SettlementInstruction) -> str:
        """Markup for the settlement box, with names HTML-escaped."""
        return (
            f"<strong>{html.escape(self.participant_name(instruction.debtor_id))}</strong> "
            f"owes <strong>{html.escape(self._settings.currency_symbol)}"
            f"{instruction.amount:.2f}</strong> "
            f"to <strong>{html.escape(self.participant_name(instruction.creditor_id))}</strong>"
        )

    def describe_splits(self, expense: Expense) -> str:
        """Split summary for the expense history, e.g. "Alice (50%), Bob (50%)"."""
        return ", ".join(
            f"{self.participant_name(participant_id)} ({percentage:g}%)"
            for participant_id, percentage in expense.splits.items()
        )
