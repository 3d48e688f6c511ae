"""
Settlement Engine

Turns a roster and a list of expenses into the transfers that square
everyone up.

DESIGN DECISION: Greedy largest-debtor / largest-creditor matching.
Debtors are sorted most negative first, creditors largest first, and the
front of each list is matched until one list runs out. This keeps the
number of transfers small for a handful of friends but is NOT guaranteed
to be the minimum (finding the minimum is NP-hard in general).

Every function here is pure: no logging, no state, fresh results on
every call.

Unknown ids (a payer or split entry that is not on the roster, e.g. a
participant removed after the expense was recorded) are skipped. Their
share is not charged to anyone.
"""

import math
from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from payback.models.ledger import SettlementInstruction


# Outstanding amounts smaller than this are considered paid off
SETTLEMENT_EPSILON = 1e-9


class SplitExpense(Protocol):
    """Anything with a payer, an amount and a percentage split."""
    payer_id: UUID
    amount: float
    splits: dict[UUID, float]


def compute_balances(
    participants: Iterable[UUID],
    expenses: Iterable[SplitExpense],
) -> dict[UUID, float]:
    """
    Net position of every participant on the roster.

    Positive means the participant is owed money, negative means they
    owe money. Keys keep roster order.
    """
    balances = {participant_id: 0.0 for participant_id in participants}

    for expense in expenses:
        if expense.payer_id in balances:
            balances[expense.payer_id] += expense.amount
        for participant_id, percentage in expense.splits.items():
            if participant_id in balances:
                balances[participant_id] -= expense.amount * percentage / 100

    return balances


def compute_settlements(
    participants: Iterable[UUID],
    expenses: Iterable[SplitExpense],
    epsilon: float = SETTLEMENT_EPSILON,
) -> list[SettlementInstruction]:
    """
    Compute the transfers that bring every balance back to zero.

    Args:
        participants: Participant ids in roster order. Ties between equal
                      balances are broken by this order.
        expenses: Recorded expenses. Split percentages are assumed to
                  sum to 100; this is not re-checked.
        epsilon: Outstanding amounts below this count as settled.

    Returns:
        Instructions in the order they were matched. Amounts are rounded
        to cents and always positive; a sub-cent remainder left by float
        drift produces no instruction.
    """
    balances = compute_balances(participants, expenses)

    # Overflowed balances cannot be settled by any finite transfer
    balances = {pid: balance for pid, balance in balances.items() if math.isfinite(balance)}

    # sorted() is stable, so equal balances keep roster order
    debtors = sorted(
        ([pid, -balance] for pid, balance in balances.items() if balance < -epsilon),
        key=lambda entry: entry[1],
        reverse=True,
    )
    creditors = sorted(
        ([pid, balance] for pid, balance in balances.items() if balance > epsilon),
        key=lambda entry: entry[1],
        reverse=True,
    )

    settlements = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor[1], creditor[1])
        rounded = round(amount, 2)
        if rounded > 0:
            settlements.append(SettlementInstruction(
                debtor_id=debtor[0],
                creditor_id=creditor[0],
                amount=rounded,
            ))

        debtor[1] -= amount
        creditor[1] -= amount

        # Written so that NaN also counts as settled
        if not debtor[1] >= epsilon:
            i += 1
        if not creditor[1] >= epsilon:
            j += 1

    return settlements


def apply_settlements(
    balances: dict[UUID, float],
    settlements: Iterable[SettlementInstruction],
) -> dict[UUID, float]:
    """
    Balances after every instruction has been paid.

    The input mapping is left untouched. Ids missing from it are added
    with a starting balance of zero.
    """
    remaining = dict(balances)
    for instruction in settlements:
        remaining[instruction.debtor_id] = remaining.get(instruction.debtor_id, 0.0) + instruction.amount
        remaining[instruction.creditor_id] = remaining.get(instruction.creditor_id, 0.0) - instruction.amount
    return remaining


def total_owed(balances: dict[UUID, float]) -> float:
    """Sum of all positive balances, i.e. the money that has to change hands."""
    return sum(balance for balance in balances.values() if balance > 0)
