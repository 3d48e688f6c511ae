"""
Streamlit Frontend for Party Payback

Three views, picked from the sidebar:
1. Friends - add and remove people
2. Expenses - record who paid for what and how it is shared
3. Settlements - who owes whom

The UI only collects input and renders results. Every rule lives in
the payback package:
- Validation happens in ExpenseValidator
- Cascading removal happens in LedgerSession
- Settlement math happens in the settlement engine
"""

import streamlit as st

from payback.activity import configure_logging
from payback.config import get_settings, validate_all_settings
from payback.models.ledger import ExpenseDraft
from payback.session import LedgerSession
from payback.settlement import apply_settlements
from payback.splits import even_split
from payback.validation import ExpenseValidationError, LedgerError


configure_logging()


# Page configuration
st.set_page_config(
    page_title="Fat Hacks Party Payback",
    page_icon="🎉",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .settlement-box {
        padding: 12px 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 8px 0;
    }
</style>
""", unsafe_allow_html=True)


def get_session() -> LedgerSession:
    """Get the ledger for this browser session, creating it on first use."""
    if "ledger" not in st.session_state:
        st.session_state.ledger = LedgerSession()
    return st.session_state.ledger


def main():
    """Main application entry point."""
    ledger = get_session()

    st.sidebar.title("🎉 Party Payback")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["👥 Friends", "🧾 Expenses", "💸 Settlements", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Add everyone in the group
        2. Record each expense and how it is split
        3. Check who owes whom
        """
    )

    if page == "👥 Friends":
        render_friends_page(ledger)
    elif page == "🧾 Expenses":
        render_expenses_page(ledger)
    elif page == "💸 Settlements":
        render_settlements_page(ledger)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_friends_page(ledger: LedgerSession):
    """Render the roster page."""
    st.title("👥 Manage Friends")

    with st.form("add_friend", clear_on_submit=True):
        name = st.text_input("Name", placeholder="Enter friend's name")
        submitted = st.form_submit_button("Add Friend", type="primary")

    if submitted:
        try:
            ledger.add_participant(name)
            st.rerun()
        except LedgerError as e:
            st.error(str(e))

    if not ledger.participants:
        st.info("No friends yet. Add someone above to get started.")
        return

    for participant in ledger.participants:
        col1, col2 = st.columns([4, 1])
        col1.markdown(f"**{participant.name}**")
        if col2.button("Remove", key=f"remove_{participant.id}"):
            removed = ledger.remove_participant(participant.id)
            if removed:
                st.toast(f"Also removed {len(removed)} expense(s) paid by {participant.name}")
            st.rerun()


def render_expenses_page(ledger: LedgerSession):
    """Render the expense entry form and history."""
    settings = get_settings().ledger
    st.title("🧾 Add Expense")

    if not ledger.can_add_expenses:
        st.warning(
            f"Add at least {settings.min_participants_for_expense} friends first!"
        )
    else:
        participants = ledger.participants
        defaults = even_split([p.id for p in participants])

        with st.form("add_expense", clear_on_submit=True):
            description = st.text_input("Description", placeholder="Expense description")
            amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
            payer = st.selectbox(
                "Who paid?",
                options=[None] + list(participants),
                format_func=lambda p: "Select..." if p is None else p.name,
            )

            st.markdown("### Split Percentages")
            splits = {}
            for participant in participants:
                splits[participant.id] = st.number_input(
                    f"{participant.name} (%)",
                    min_value=0.0,
                    max_value=100.0,
                    step=0.1,
                    value=defaults[participant.id],
                    key=f"split_{participant.id}",
                )

            submitted = st.form_submit_button("Add Expense", type="primary")

        if submitted:
            draft = ExpenseDraft(
                description=description,
                amount=amount,
                payer_id=payer.id if payer else None,
                splits=splits,
            )
            try:
                expense = ledger.add_expense(draft)
                st.success(f"✅ Added: {expense.description}")
            except ExpenseValidationError as e:
                for issue in e.result.issues:
                    hint = f" ({issue.suggested_fix})" if issue.suggested_fix else ""
                    st.error(f"{issue.message}{hint}")

    st.markdown("---")
    st.subheader("Expense History")

    if not ledger.expenses:
        st.info("No expenses recorded yet.")
        return

    for expense in ledger.expenses:
        with st.container(border=True):
            st.markdown(
                f"**{expense.description}** - "
                f"{settings.currency_symbol}{expense.amount:.2f}"
            )
            st.caption(f"Paid by: {ledger.participant_name(expense.payer_id)}")
            st.caption(f"Split: {ledger.describe_splits(expense)}")


def render_settlements_page(ledger: LedgerSession):
    """Render balances and the settlement instructions."""
    settings = get_settings().ledger
    st.title("💸 Settlements")

    instructions = ledger.settlements()

    if not instructions:
        st.success("Everyone is settled up. Nothing to pay!")
    for instruction in instructions:
        st.markdown(
            f'<div class="settlement-box">{ledger.describe_html(instruction)}</div>',
            unsafe_allow_html=True,
        )

    if ledger.orphaned_split_ids():
        st.warning(
            "Some expenses were split with friends who have since been removed. "
            "Their shares are not included above."
        )

    balances = ledger.balances()
    if not balances:
        return

    with st.expander("📊 Balances"):
        remaining = apply_settlements(balances, instructions)
        for participant in ledger.participants:
            balance = balances[participant.id]
            col1, col2 = st.columns(2)
            col1.markdown(participant.name)
            col2.markdown(f"{settings.currency_symbol}{balance:+.2f}")
        if all(abs(value) < 0.01 for value in remaining.values()):
            st.caption("After these payments everyone is back to zero.")


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    groups = [
        ("Ledger rules", "ledger"),
        ("Logging", "logging"),
    ]

    for name, key in groups:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    ledger_settings = get_settings().ledger
    st.markdown("---")
    st.markdown("### Current Values")
    st.json(ledger_settings.model_dump())
    st.markdown(
        "Override any value with a `PAYBACK_`-prefixed environment variable "
        "or a `.env` file, e.g. `PAYBACK_CURRENCY_SYMBOL=€`."
    )


if __name__ == "__main__":
    main()
