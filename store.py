"""
store.py
MemberStore: owns the member collection and persists it after every change.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional

import utils
from models import DEFAULT_REMINDER_MESSAGE, Member, Payment, Reminder, new_id


class ValidationError(ValueError):
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class MemberStore:
    """
    Mutations replace the affected member and return it (or None when the id
    is unknown). ``on_change`` receives the full collection after each one.
    """

    def __init__(self, members: Iterable[Member] = (), on_change: Optional[Callable] = None):
        self._members: tuple[Member, ...] = tuple(members)
        self._on_change = on_change

    @property
    def members(self) -> tuple[Member, ...]:
        return self._members

    def get_member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self._members if m.id == member_id), None)

    def _commit(self, members: tuple[Member, ...]) -> None:
        self._members = members
        if self._on_change is not None:
            self._on_change(self._members)

    def _replace(self, member_id: str, update: Callable[[Member], Member]) -> Optional[Member]:
        for i, m in enumerate(self._members):
            if m.id == member_id:
                updated = update(m)
                self._commit(self._members[:i] + (updated,) + self._members[i + 1:])
                return updated
        logging.warning(f"No member with id {member_id}; nothing changed.")
        return None

    def add_member(
        self,
        name: str,
        address: str,
        phone: str,
        subscription_amount,
        start_date: str,
        email: str = "",
        notes: str = "",
    ) -> Member:
        errors = utils.validate_member_inputs(name, address, phone, subscription_amount, start_date)
        if errors:
            raise ValidationError(errors)

        member = Member(
            id=new_id(),
            name=name.strip(),
            address=address.strip(),
            phone=phone.strip(),
            email=email.strip(),
            subscription_amount=float(subscription_amount),
            start_date=start_date,
            notes=notes.strip(),
        )
        self._commit(self._members + (member,))
        logging.info(f"Added member {member.name} ({member.id}).")
        return member

    def record_payment(self, member_id: str, pay_date: str, amount, notes: str = "") -> Optional[Member]:
        errors = utils.validate_payment_inputs(pay_date, amount)
        if errors:
            raise ValidationError(errors)

        payment = Payment(id=new_id(), date=pay_date, amount=float(amount), notes=notes.strip())
        updated = self._replace(
            member_id,
            lambda m: replace(m, payment_history=m.payment_history + (payment,)),
        )
        if updated:
            logging.info(f"Recorded payment of {payment.amount} on {payment.date} for {updated.name}.")
        return updated

    def send_reminder(self, member_id: str, method: str, message: str = "") -> Optional[Member]:
        errors = utils.validate_reminder_method(method)
        if errors:
            raise ValidationError(errors)

        reminder = Reminder(
            id=new_id(),
            date=utils.today_iso(),
            method=method,
            message=message.strip() or DEFAULT_REMINDER_MESSAGE,
        )
        updated = self._replace(
            member_id,
            lambda m: replace(m, reminders_sent=m.reminders_sent + (reminder,)),
        )
        if updated:
            logging.info(f"Logged {method} reminder for {updated.name}.")
        return updated

    def set_active(self, member_id: str, active: bool) -> Optional[Member]:
        updated = self._replace(member_id, lambda m: replace(m, is_active=active))
        if updated:
            logging.info(f"Member {updated.name} marked {'active' if active else 'inactive'}.")
        return updated
