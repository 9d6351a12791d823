"""
models.py
Domain dataclasses (members, payments, reminders) and their JSON shape.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import datetime
import math
import uuid

CURRENCY_SYMBOL = "₹"

DEFAULT_COLLECTOR = "Current User"
DEFAULT_COLLECTION_METHOD = "Cash"  # door-to-door collection
DEFAULT_REMINDER_MESSAGE = "Friendly reminder about your monthly subscription"

# Reminder methods (stored value -> label)
REMINDER_METHODS = {
    "sms": "SMS",
    "phone": "Phone Call",
    "email": "Email",
    "whatsapp": "WhatsApp",
}


def new_id() -> str:
    return uuid.uuid4().hex


# Loading helpers: bad values raise ValueError/TypeError

def _iso_date(value) -> str:
    datetime.date.fromisoformat(value)
    return value


def _amount(value) -> float:
    amount = float(value)
    if not math.isfinite(amount):
        raise ValueError(f"Amount is not a finite number: {value!r}")
    return amount


def _flag(value) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Expected a JSON boolean, got {value!r}")
    return value


@dataclass(frozen=True)
class Payment:
    id: str
    date: str  # ISO YYYY-MM-DD
    amount: float
    notes: str = ""
    collected_by: str = DEFAULT_COLLECTOR
    collection_method: str = DEFAULT_COLLECTION_METHOD

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "amount": self.amount,
            "notes": self.notes,
            "collectedBy": self.collected_by,
            "collectionMethod": self.collection_method,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Payment:
        return cls(
            id=str(data["id"]),
            date=_iso_date(data["date"]),
            amount=_amount(data["amount"]),
            notes=data.get("notes") or "",
            collected_by=data.get("collectedBy", DEFAULT_COLLECTOR),
            collection_method=data.get("collectionMethod", DEFAULT_COLLECTION_METHOD),
        )


@dataclass(frozen=True)
class Reminder:
    id: str
    date: str
    method: str  # key of REMINDER_METHODS
    message: str = DEFAULT_REMINDER_MESSAGE
    sent_by: str = DEFAULT_COLLECTOR

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "method": self.method,
            "message": self.message,
            "sentBy": self.sent_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Reminder:
        return cls(
            id=str(data["id"]),
            date=_iso_date(data["date"]),
            method=data["method"],
            message=data.get("message") or DEFAULT_REMINDER_MESSAGE,
            sent_by=data.get("sentBy", DEFAULT_COLLECTOR),
        )


@dataclass(frozen=True)
class Member:
    id: str
    name: str
    address: str
    phone: str
    subscription_amount: float
    start_date: str
    email: str = ""
    notes: str = ""
    is_active: bool = True
    payment_history: tuple[Payment, ...] = field(default_factory=tuple)
    reminders_sent: tuple[Reminder, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """
        Same keys as the browser version's localStorage records, so existing
        exports load unchanged.
        """
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "subscriptionAmount": self.subscription_amount,
            "startDate": self.start_date,
            "paymentHistory": [p.to_dict() for p in self.payment_history],
            "remindersSent": [r.to_dict() for r in self.reminders_sent],
            "notes": self.notes,
            "isActive": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Member:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            address=data["address"],
            phone=data["phone"],
            subscription_amount=_amount(data["subscriptionAmount"]),
            start_date=_iso_date(data["startDate"]),
            email=data.get("email") or "",
            notes=data.get("notes") or "",
            is_active=_flag(data.get("isActive", True)),
            payment_history=tuple(Payment.from_dict(p) for p in data.get("paymentHistory", [])),
            reminders_sent=tuple(Reminder.from_dict(r) for r in data.get("remindersSent", [])),
        )


@dataclass(frozen=True)
class PeriodStats:
    expected: float = 0.0
    collected: float = 0.0
    pending: float = 0.0
