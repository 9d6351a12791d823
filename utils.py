"""
utils.py
Validation, dates, due status, period statistics, search, exports.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
import math
import pandas as pd

from models import Member, PeriodStats, REMINDER_METHODS


def today_iso() -> str:
    return date.today().isoformat()


def parse_iso(d: str) -> date:
    return date.fromisoformat(d)


def add_months(start: date, months: int) -> date:
    """
    Add months while keeping day in valid range (e.g., Jan 31 + 1 month => Feb 28/29).
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    # last day of target month
    if m == 12:
        next_month = date(y + 1, 1, 1)
    else:
        next_month = date(y, m + 1, 1)
    last_day = next_month - timedelta(days=1)
    day = min(start.day, last_day.day)
    return date(y, m, day)


def _as_date(reference: date | datetime | None) -> date:
    if reference is None:
        return date.today()
    if isinstance(reference, datetime):
        return reference.date()
    return reference


# ---------- Validation ----------

def validate_member_inputs(name: str, address: str, phone: str, subscription_amount, start_date: str) -> list[str]:
    errors: list[str] = []
    if not name.strip():
        errors.append("Name is required.")
    if not address.strip():
        errors.append("Address is required.")
    if not phone.strip():
        errors.append("Phone is required.")
    try:
        value = float(subscription_amount)
        if not math.isfinite(value):
            errors.append("Subscription amount must be numeric.")
        elif value <= 0:
            errors.append("Subscription amount must be greater than 0.")
    except (TypeError, ValueError):
        errors.append("Subscription amount must be numeric.")
    try:
        parse_iso(start_date)
    except (TypeError, ValueError):
        errors.append("Start date must be a valid ISO date (YYYY-MM-DD).")
    return errors


def validate_payment_inputs(pay_date: str, amount) -> list[str]:
    errors: list[str] = []
    if not pay_date:
        errors.append("Payment date is required.")
    else:
        try:
            parse_iso(pay_date)
        except (TypeError, ValueError):
            errors.append("Payment date must be a valid ISO date (YYYY-MM-DD).")
    try:
        value = float(amount)
        if not math.isfinite(value):
            errors.append("Amount must be numeric.")
        elif value <= 0:
            errors.append("Amount must be > 0.")
    except (TypeError, ValueError):
        errors.append("Amount must be numeric.")
    return errors


def validate_reminder_method(method: str) -> list[str]:
    if method not in REMINDER_METHODS:
        return [f"Unknown reminder method: {method!r}."]
    return []


# ---------- Due status ----------

def last_payment_date(member: Member) -> date | None:
    # Ties on the same date are irrelevant: only the date is used.
    if not member.payment_history:
        return None
    return max(parse_iso(p.date) for p in member.payment_history)


def next_due_date(member: Member) -> date:
    last = last_payment_date(member)
    if last is None:
        return parse_iso(member.start_date)
    return add_months(last, 1)


def is_payment_due(member: Member, reference: date | datetime | None = None) -> bool:
    """
    A member who never paid is due once the start date is reached; otherwise
    one calendar month after the latest payment (boundary inclusive).
    """
    return next_due_date(member) <= _as_date(reference)


# ---------- Period statistics ----------

def compute_period_stats(members, month: int, year: int) -> PeriodStats:
    """
    Expected / collected / pending for one (month, year), active members only.

    Only the first payment in the period (history order) is credited, capped at
    the subscription amount; the rest of the subscription stays pending.
    """
    expected = collected = pending = 0.0
    for m in members:
        if not m.is_active:
            continue
        expected += m.subscription_amount

        in_period = next(
            (p for p in m.payment_history
             if parse_iso(p.date).month == month and parse_iso(p.date).year == year),
            None,
        )
        if in_period is None:
            pending += m.subscription_amount
            continue

        credited = min(in_period.amount, m.subscription_amount)
        collected += credited
        pending += m.subscription_amount - credited

    return PeriodStats(expected=expected, collected=collected, pending=pending)


def year_options(today: date | None = None) -> list[int]:
    y = (today or date.today()).year
    return list(range(y - 2, y + 3))


# ---------- Listing ----------

def search_members(members, query: str) -> list[Member]:
    q = query.strip()
    if not q:
        return list(members)
    lowered = q.lower()
    return [
        m for m in members
        if lowered in m.name.lower() or lowered in m.address.lower() or q in m.phone
    ]


def sorted_payments(member: Member):
    return sorted(member.payment_history, key=lambda p: p.date, reverse=True)


def sorted_reminders(member: Member):
    return sorted(member.reminders_sent, key=lambda r: r.date, reverse=True)


def members_frame(members, reference: date | None = None) -> pd.DataFrame:
    ref = _as_date(reference)
    rows = [
        {
            "id": m.id,
            "name": m.name,
            "address": m.address,
            "phone": m.phone,
            "subscription": m.subscription_amount,
            "status": "Payment Due" if is_payment_due(m, ref) else "Current",
            "active": m.is_active,
        }
        for m in members
    ]
    return pd.DataFrame(rows, columns=["id", "name", "address", "phone", "subscription", "status", "active"])


# ---------- Exports ----------

def members_to_csv_bytes(members) -> bytes:
    rows = []
    for m in members:
        row = m.to_dict()
        row.pop("paymentHistory")
        row.pop("remindersSent")
        rows.append(row)
    df = pd.DataFrame(rows)
    return df.to_csv(index=False).encode("utf-8")


def payments_to_csv_bytes(members) -> bytes:
    rows = [
        {"member_id": m.id, "name": m.name, **p.to_dict()}
        for m in members
        for p in m.payment_history
    ]
    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values("date", ascending=False)
    return df.to_csv(index=False).encode("utf-8")
