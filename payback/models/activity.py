"""
Activity Models for Party Payback

Every user action on the ledger produces one structured log event.
This provides:
1. Debugging information when a settlement looks wrong
2. A consistent shape for log lines, whatever triggered them

DESIGN DECISION: Events go to the log and nowhere else. Nothing is
stored, so there is no history to query once the session ends.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Roster
    PARTICIPANT_ADDED = "participant_added"
    PARTICIPANT_REJECTED = "participant_rejected"
    PARTICIPANT_REMOVED = "participant_removed"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REJECTED = "expense_rejected"
    EXPENSES_CASCADED = "expenses_cascaded"

    # Settlement
    SETTLEMENTS_COMPUTED = "settlements_computed"
    ORPHANED_SPLITS_IGNORED = "orphaned_splits_ignored"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """
    A single activity event.

    Every mutation of a session creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )

    event_type: ActivityEventType = Field(
        ...,
        description="Type of event"
    )
    severity: ActivitySeverity = Field(
        default=ActivitySeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'participant', 'expense')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "is_user_action": self.is_user_action,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.participant_added(participant_id, name)
        event = ActivityEventBuilder.settlements_computed(3, 120.5)
    """

    @staticmethod
    def participant_added(participant_id: UUID, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PARTICIPANT_ADDED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant added: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def participant_rejected(name: str, reason: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PARTICIPANT_REJECTED,
            severity=ActivitySeverity.WARNING,
            entity_type="participant",
            description=f"Participant rejected: {reason}",
            details={"name": name, "reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def participant_removed(
        participant_id: UUID,
        name: str,
        cascaded_expenses: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PARTICIPANT_REMOVED,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant removed: {name}",
            details={
                "name": name,
                "cascaded_expenses": cascaded_expenses,
            },
            is_user_action=True,
        )

    @staticmethod
    def expenses_cascaded(
        payer_id: UUID,
        expense_ids: list[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSES_CASCADED,
            entity_type="participant",
            entity_id=payer_id,
            description=f"{len(expense_ids)} expense(s) removed along with their payer",
            details={"expense_ids": [str(expense_id) for expense_id in expense_ids]},
        )

    @staticmethod
    def expense_added(
        expense_id: UUID,
        description: str,
        amount: float,
        payer_id: UUID,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {description}",
            details={
                "amount": round(amount, 2),
                "payer_id": str(payer_id),
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_rejected(issues: list[dict]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_REJECTED,
            severity=ActivitySeverity.WARNING,
            entity_type="expense",
            description=f"Expense rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def settlements_computed(
        instruction_count: int,
        total_transferred: float,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SETTLEMENTS_COMPUTED,
            severity=ActivitySeverity.DEBUG,
            entity_type="settlement",
            description=f"Computed {instruction_count} settlement instruction(s)",
            details={
                "instruction_count": instruction_count,
                "total_transferred": round(total_transferred, 2),
            },
        )

    @staticmethod
    def orphaned_splits_ignored(participant_ids: list[UUID]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ORPHANED_SPLITS_IGNORED,
            severity=ActivitySeverity.WARNING,
            entity_type="settlement",
            description="Splits reference participants who were removed; their shares are ignored",
            details={"participant_ids": [str(pid) for pid in participant_ids]},
        )
