"""
app.py
Streamlit membership subscription tracker.
Run: streamlit run app.py
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
import pandas as pd
import streamlit as st

import db
import utils
from models import CURRENCY_SYMBOL, REMINDER_METHODS
from store import MemberStore, ValidationError

ORG_NAME = "Radha Giridhari Sevaashram"

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)

st.set_page_config(page_title="Member Subscriptions", layout="wide")


def get_store() -> MemberStore:
    # One store per session, loaded once from disk
    if "store" not in st.session_state:
        st.session_state.store = MemberStore(db.load_members(), on_change=db.save_members)
    return st.session_state.store


def money(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def open_member(member_id: str):
    st.session_state.selected_member_id = member_id
    st.session_state.page = "Member details"


def dashboard_page(store: MemberStore):
    st.header(f"📊 {ORG_NAME}")

    st.subheader("Monthly collection statistics")
    today = date.today()
    c1, c2 = st.columns(2)
    with c1:
        month = st.selectbox(
            "Month",
            options=list(range(1, 13)),
            index=today.month - 1,
            format_func=lambda m: calendar.month_name[m],
        )
    with c2:
        years = utils.year_options(today)
        year = st.selectbox("Year", options=years, index=years.index(today.year))

    stats = utils.compute_period_stats(store.members, month, year)
    c1, c2, c3 = st.columns(3)
    c1.metric("Expected", money(stats.expected))
    c2.metric("Collected", money(stats.collected))
    c3.metric("Pending", money(stats.pending))

    st.divider()

    search = st.text_input("Search by name, address, or phone")
    members = utils.search_members(store.members, search)
    st.subheader(f"Members ({len(members)})")
    if not members:
        st.caption("No members found. Add members to get started.")
        return

    df = utils.members_frame(members, today)
    st.dataframe(df.drop(columns=["id"]), use_container_width=True, hide_index=True)

    labels = {f"{m.name} ({m.phone})": m.id for m in members}
    chosen = st.selectbox("Member", list(labels.keys()))
    if st.button("View details", type="primary"):
        open_member(labels[chosen])
        st.rerun()


def add_member_page(store: MemberStore):
    st.header("➕ Add Member")

    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Name *")
        address = st.text_area("Address *")
        phone = st.text_input("Phone *")
        email = st.text_input("Email")
    with col2:
        amount = st.text_input(f"Subscription amount ({CURRENCY_SYMBOL}) *")
        start_date = st.date_input("Start date *", value=date.today()).isoformat()
        notes = st.text_area("Notes")

    if st.button("Add member", type="primary"):
        try:
            member = store.add_member(name, address, phone, amount, start_date, email=email, notes=notes)
        except ValidationError as e:
            for msg in e.errors:
                st.error(msg)
            return
        st.success(f"Member {member.name} added.")
        st.session_state.page = "Dashboard"
        st.rerun()


def member_details_page(store: MemberStore):
    member_id = st.session_state.get("selected_member_id")
    member = store.get_member(member_id) if member_id else None
    if member is None:
        st.info("No member selected. Pick one from the dashboard.")
        return

    st.header(f"👤 {member.name}")

    c1, c2 = st.columns(2)
    with c1:
        st.markdown("**Personal information**")
        st.write(f"Address: {member.address}")
        st.write(f"Phone: {member.phone}")
        st.write(f"Email: {member.email or 'N/A'}")
    with c2:
        st.markdown("**Subscription**")
        st.write(f"Amount: {money(member.subscription_amount)}")
        st.write(f"Start date: {member.start_date}")
        st.write(f"Status: {'Active' if member.is_active else 'Inactive'}")
        due = utils.is_payment_due(member)
        st.write(f"Payment due: {'Yes' if due else 'No'} (next due {utils.next_due_date(member).isoformat()})")

    active = st.toggle("Active", value=member.is_active)
    if active != member.is_active:
        store.set_active(member.id, active)
        st.rerun()

    st.markdown("**Notes**")
    st.write(member.notes or "No notes available")

    st.divider()

    st.subheader("Record cash payment")
    c1, c2, c3 = st.columns([1, 1, 2])
    with c1:
        pay_date = st.date_input("Date", value=date.today()).isoformat()
    with c2:
        amount = st.text_input(f"Amount ({CURRENCY_SYMBOL})", value=str(member.subscription_amount))
    with c3:
        pay_notes = st.text_input("Notes", placeholder="Month covered, etc.")

    if st.button("Record payment", type="primary"):
        try:
            store.record_payment(member.id, pay_date, amount, pay_notes)
        except ValidationError as e:
            for msg in e.errors:
                st.error(msg)
        else:
            st.success("Payment recorded.")
            st.rerun()

    st.subheader("Send reminder")
    c1, c2 = st.columns([1, 2])
    with c1:
        method = st.selectbox("Method", options=list(REMINDER_METHODS.keys()), format_func=REMINDER_METHODS.get)
    with c2:
        message = st.text_input("Message", placeholder="Custom message (optional)")

    if st.button("Send reminder"):
        if store.send_reminder(member.id, method, message) is not None:
            st.success(f"Reminder sent to {member.name}!")

    st.divider()

    st.subheader("Payment history")
    payments = utils.sorted_payments(member)
    if payments:
        df = pd.DataFrame([p.to_dict() for p in payments])
        st.dataframe(df[["date", "amount", "collectedBy", "notes"]], use_container_width=True, hide_index=True)
    else:
        st.caption("No payment records available.")

    st.subheader("Reminder history")
    reminders = utils.sorted_reminders(member)
    if reminders:
        df = pd.DataFrame([r.to_dict() for r in reminders])
        df["method"] = df["method"].map(REMINDER_METHODS)
        st.dataframe(df[["date", "method", "message", "sentBy"]], use_container_width=True, hide_index=True)
    else:
        st.caption("No reminder records available.")


def reports_page(store: MemberStore):
    st.header("🧾 Reports")

    st.subheader("Export members to CSV")
    if store.members:
        st.download_button(
            "Download members.csv",
            data=utils.members_to_csv_bytes(store.members),
            file_name="members.csv",
            mime="text/csv",
        )
    else:
        st.caption("No members to export.")

    st.divider()

    st.subheader("Export payments to CSV")
    if any(m.payment_history for m in store.members):
        st.download_button(
            "Download payments.csv",
            data=utils.payments_to_csv_bytes(store.members),
            file_name="payments.csv",
            mime="text/csv",
        )
    else:
        st.caption("No payments to export.")


def main_app():
    store = get_store()

    st.sidebar.title("🪔 Subscriptions")
    pages = ["Dashboard", "Add member", "Member details", "Reports"]
    if "page" not in st.session_state:
        st.session_state.page = "Dashboard"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.session_state.page == "Dashboard":
        dashboard_page(store)
    elif st.session_state.page == "Add member":
        add_member_page(store)
    elif st.session_state.page == "Member details":
        member_details_page(store)
    elif st.session_state.page == "Reports":
        reports_page(store)


if __name__ == "__main__":
    main_app()
