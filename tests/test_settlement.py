"""Tests for the settlement engine."""

import pytest
from uuid import uuid4

from payback.models.ledger import Expense
from payback.settlement import (
    apply_settlements,
    compute_balances,
    compute_settlements,
    total_owed,
)


def make_expense(payer, amount, splits, description="Expense"):
    return Expense(
        description=description,
        amount=amount,
        payer_id=payer,
        splits=splits,
    )


@pytest.fixture
def abc():
    """Three participants in roster order."""
    return uuid4(), uuid4(), uuid4()


@pytest.fixture
def weekend_trip(abc):
    """A messier set of expenses among four people."""
    a, b, c = abc
    d = uuid4()
    roster = [a, b, c, d]
    expenses = [
        make_expense(a, 240.0, {a: 25, b: 25, c: 25, d: 25}, "Cabin"),
        make_expense(b, 87.35, {a: 10, b: 40, c: 30, d: 20}, "Groceries"),
        make_expense(c, 19.99, {a: 33.33, b: 33.33, d: 33.34}, "Firewood"),
        make_expense(d, 150.0, {c: 60, d: 40}, "Fuel"),
        make_expense(a, 12.1, {b: 100}, "Ice cream"),
    ]
    return roster, expenses


class TestComputeBalances:
    """Tests for compute_balances."""

    def test_two_party_balances(self, abc):
        """Test A pays 100 split 50/50."""
        a, b, _ = abc
        balances = compute_balances([a, b], [make_expense(a, 100, {a: 50, b: 50})])
        assert balances[a] == pytest.approx(50.0)
        assert balances[b] == pytest.approx(-50.0)

    def test_three_party_balances(self, abc):
        """Test the uneven three-way scenario."""
        a, b, c = abc
        expenses = [
            make_expense(a, 90, {a: 33.33, b: 33.33, c: 33.34}),
            make_expense(b, 60, {a: 50, b: 0, c: 50}),
        ]
        balances = compute_balances([a, b, c], expenses)
        assert balances[a] == pytest.approx(30.003)
        assert balances[b] == pytest.approx(30.003)
        assert balances[c] == pytest.approx(-60.006)

    def test_balances_sum_to_zero(self, weekend_trip):
        """Test every dollar paid is allocated via splits."""
        roster, expenses = weekend_trip
        balances = compute_balances(roster, expenses)
        assert sum(balances.values()) == pytest.approx(0.0, abs=1e-9)

    def test_everyone_on_roster_gets_a_balance(self, abc):
        """Test participants with no expenses are present at zero."""
        a, b, c = abc
        balances = compute_balances([a, b, c], [])
        assert balances == {a: 0.0, b: 0.0, c: 0.0}
        assert list(balances) == [a, b, c]

    def test_unknown_ids_are_ignored(self, abc):
        """Test split entries and payers not on the roster are skipped."""
        a, b, _ = abc
        removed = uuid4()
        expenses = [
            make_expense(a, 90, {a: 33.33, b: 33.33, removed: 33.34}),
            make_expense(removed, 50, {a: 50, b: 50}),
        ]
        balances = compute_balances([a, b], expenses)
        assert set(balances) == {a, b}
        assert balances[a] == pytest.approx(90 - 29.997 - 25)
        assert balances[b] == pytest.approx(-29.997 - 25)


class TestComputeSettlements:
    """Tests for compute_settlements."""

    def test_empty_inputs(self, abc):
        """Test empty roster or no expenses yields nothing."""
        assert compute_settlements([], []) == []
        assert compute_settlements(list(abc), []) == []

    def test_sole_beneficiary_is_a_no_op(self, abc):
        """Test paying for yourself settles nothing."""
        a, b, _ = abc
        assert compute_settlements([a, b], [make_expense(a, 42, {a: 100})]) == []

    def test_two_party_scenario(self, abc):
        """Test B pays A 50.00."""
        a, b, _ = abc
        settlements = compute_settlements([a, b], [make_expense(a, 100, {a: 50, b: 50})])
        assert len(settlements) == 1
        assert settlements[0].debtor_id == b
        assert settlements[0].creditor_id == a
        assert settlements[0].amount == 50.00

    def test_three_party_scenario_zeroes_balances(self, abc):
        """Test applying the instructions leaves every balance within a cent of zero."""
        a, b, c = abc
        expenses = [
            make_expense(a, 90, {a: 33.33, b: 33.33, c: 33.34}),
            make_expense(b, 60, {a: 50, b: 0, c: 50}),
        ]
        balances = compute_balances([a, b, c], expenses)
        settlements = compute_settlements([a, b, c], expenses)

        assert len(settlements) == 2
        assert all(s.debtor_id == c for s in settlements)
        assert {s.creditor_id for s in settlements} == {a, b}

        remaining = apply_settlements(balances, settlements)
        for value in remaining.values():
            assert value == pytest.approx(0.0, abs=0.01)

    def test_largest_debtor_pays_largest_creditor_first(self, abc):
        """Test the greedy ordering."""
        a, b, c = abc
        d = uuid4()
        # a: +70, b: +30, c: -60, d: -40
        expenses = [
            make_expense(a, 100, {a: 30, c: 40, d: 30}),
            make_expense(b, 50, {b: 40, c: 40, d: 20}),
        ]
        settlements = compute_settlements([a, b, c, d], expenses)

        assert [(s.debtor_id, s.creditor_id, s.amount) for s in settlements] == [
            (c, a, 60.0),
            (d, a, 10.0),
            (d, b, 30.0),
        ]

    def test_ties_keep_roster_order(self, abc):
        """Test equal balances are matched in roster order."""
        a, b, c = abc
        settlements = compute_settlements([a, b, c], [make_expense(c, 30, {a: 50, b: 50})])
        assert [s.debtor_id for s in settlements] == [a, b]

        settlements = compute_settlements([b, a, c], [make_expense(c, 30, {a: 50, b: 50})])
        assert [s.debtor_id for s in settlements] == [b, a]

    def test_amounts_are_rounded_to_cents(self, abc):
        """Test instruction amounts carry at most two decimals."""
        a, b, c = abc
        settlements = compute_settlements(
            [a, b, c],
            [make_expense(a, 10, {a: 33.33, b: 33.33, c: 33.34})],
        )
        assert [s.amount for s in settlements] == [3.33, 3.33]

    def test_sub_cent_balance_produces_no_instruction(self, abc):
        """Test a transfer that rounds to 0.00 is not emitted."""
        a, b, _ = abc
        # b owes a tenth of a cent
        settlements = compute_settlements([a, b], [make_expense(a, 0.1, {a: 99, b: 1})])
        assert settlements == []

    def test_float_drift_terminates(self, abc):
        """Test many small float amounts still settle cleanly."""
        a, b, c = abc
        expenses = [
            make_expense(payer, 0.1, {a: 33.33, b: 33.33, c: 33.34})
            for payer in [a, b, c, a, a, b] * 10
        ]
        balances = compute_balances([a, b, c], expenses)
        settlements = compute_settlements([a, b, c], expenses)

        assert all(s.amount > 0 for s in settlements)
        remaining = apply_settlements(balances, settlements)
        for value in remaining.values():
            assert value == pytest.approx(0.0, abs=0.01)

    def test_settlement_properties(self, weekend_trip):
        """Test conservation and correctness on a larger example."""
        roster, expenses = weekend_trip
        balances = compute_balances(roster, expenses)
        settlements = compute_settlements(roster, expenses)

        assert settlements
        assert len(settlements) <= len(roster) - 1
        for s in settlements:
            assert s.debtor_id != s.creditor_id
            assert balances[s.debtor_id] < 0
            assert balances[s.creditor_id] > 0

        tolerance = 0.01 * len(settlements)
        assert sum(s.amount for s in settlements) == pytest.approx(total_owed(balances), abs=tolerance)

        remaining = apply_settlements(balances, settlements)
        for value in remaining.values():
            assert value == pytest.approx(0.0, abs=0.01)

    def test_overflowing_balances_terminate(self, abc):
        """Test infinite balances are skipped instead of looping forever."""
        a, b, _ = abc
        expenses = [make_expense(a, 1e308, {b: 100}) for _ in range(2)]

        balances = compute_balances([a, b], expenses)
        assert balances[a] == float("inf")
        assert balances[b] == float("-inf")

        assert compute_settlements([a, b], expenses) == []

    def test_finite_balances_settle_next_to_overflow(self, abc):
        """Test an overflowed pair does not stop everyone else settling."""
        a, b, c = abc
        d = uuid4()
        expenses = [
            make_expense(a, 1e308, {b: 100}),
            make_expense(a, 1e308, {b: 100}),
            make_expense(c, 40, {c: 50, d: 50}),
        ]
        settlements = compute_settlements([a, b, c, d], expenses)
        assert [(s.debtor_id, s.creditor_id, s.amount) for s in settlements] == [(d, c, 20.0)]

    def test_fresh_result_every_call(self, weekend_trip):
        """Test the engine is deterministic and keeps no state."""
        roster, expenses = weekend_trip
        first = compute_settlements(roster, expenses)
        second = compute_settlements(roster, expenses)
        assert first == second
        assert first is not second


class TestApplySettlements:
    """Tests for apply_settlements."""

    def test_input_is_not_modified(self, abc):
        """Test the input balances are left alone."""
        a, b, _ = abc
        balances = {a: 50.0, b: -50.0}
        settlements = compute_settlements([a, b], [make_expense(a, 100, {a: 50, b: 50})])
        remaining = apply_settlements(balances, settlements)
        assert balances == {a: 50.0, b: -50.0}
        assert remaining == {a: 0.0, b: 0.0}

    def test_total_owed(self, abc):
        """Test total_owed only counts creditors."""
        a, b, c = abc
        assert total_owed({a: 30.0, b: 20.0, c: -50.0}) == pytest.approx(50.0)
        assert total_owed({}) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
