"""
Activity Logger

DESIGN DECISION: Every user action on the ledger is logged as one
structured event. This provides:
1. Traceability when a settlement looks wrong
2. Debugging capability without a debugger attached to Streamlit

The activity logger:
- Is synchronous (there is no I/O beyond the log handler)
- Never raises into the caller: a broken handler must not lose user input
"""

import logging
import sys
from typing import Optional

import structlog

from payback.config import LoggingSettings, get_settings
from payback.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


def configure_structlog(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog to render through stdlib loggers.

    Called once at import. Handlers and levels are left to whoever owns
    the process (see configure_logging).
    """
    settings = settings or get_settings().logging

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.render_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Set up stdlib logging for an application entry point.

    Existing root handlers are kept; basicConfig is a no-op once the
    process has configured logging itself.
    """
    settings = settings or get_settings().logging

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.level),
    )
    configure_structlog(settings)


configure_structlog()


class ActivityLogger:
    """
    Central activity logging service.

    Writes every event to the structured local log. There is no
    persistent backend.
    """

    def __init__(self, logger_name: str = "payback.activity"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: ActivityEvent) -> bool:
        """
        Log an activity event.

        Returns True if the event was handed to the log handler.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == ActivitySeverity.ERROR:
                self._logger.error("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.WARNING:
                self._logger.warning("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.DEBUG:
                self._logger.debug("activity_event", **log_dict)
            else:
                self._logger.info("activity_event", **log_dict)
        except Exception as e:
            # Logging must never take the session down with it
            print(f"Warning: could not log activity event: {e}", file=sys.stderr)
            return False

        return True

    def log_participant_added(self, participant_id, name: str) -> None:
        """Log a new participant."""
        self.log(ActivityEventBuilder.participant_added(participant_id, name))

    def log_participant_rejected(self, name: str, reason: str) -> None:
        """Log a participant name that failed validation."""
        self.log(ActivityEventBuilder.participant_rejected(name, reason))

    def log_participant_removed(
        self,
        participant_id,
        name: str,
        removed_expense_ids: list,
    ) -> None:
        """Log a removal, plus the cascade if it took expenses with it."""
        self.log(ActivityEventBuilder.participant_removed(
            participant_id=participant_id,
            name=name,
            cascaded_expenses=len(removed_expense_ids),
        ))
        if removed_expense_ids:
            self.log(ActivityEventBuilder.expenses_cascaded(
                payer_id=participant_id,
                expense_ids=removed_expense_ids,
            ))

    def log_expense_added(
        self,
        expense_id,
        description: str,
        amount: float,
        payer_id,
    ) -> None:
        """Log a recorded expense."""
        self.log(ActivityEventBuilder.expense_added(
            expense_id=expense_id,
            description=description,
            amount=amount,
            payer_id=payer_id,
        ))

    def log_expense_rejected(self, issues: list[dict]) -> None:
        """Log an expense draft that failed validation."""
        self.log(ActivityEventBuilder.expense_rejected(issues))

    def log_settlements_computed(
        self,
        instruction_count: int,
        total_transferred: float,
    ) -> None:
        self.log(ActivityEventBuilder.settlements_computed(
            instruction_count=instruction_count,
            total_transferred=total_transferred,
        ))

    def log_orphaned_splits(self, participant_ids: list) -> None:
        self.log(ActivityEventBuilder.orphaned_splits_ignored(participant_ids))
