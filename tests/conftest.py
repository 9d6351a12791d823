import pytest

import db
from models import Member, Payment


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    path = tmp_path / "members.db"
    monkeypatch.setattr(db, "DB_FILE", path)
    return path


def make_member(payments=(), start_date="2024-01-01", amount=100.0, active=True, member_id="m1", **kwargs) -> Member:
    return Member(
        id=member_id,
        name=kwargs.pop("name", "Asha Rao"),
        address=kwargs.pop("address", "12 Temple Road"),
        phone=kwargs.pop("phone", "9800000001"),
        subscription_amount=amount,
        start_date=start_date,
        is_active=active,
        payment_history=tuple(
            Payment(id=f"{member_id}-p{i}", date=d, amount=a) for i, (d, a) in enumerate(payments)
        ),
        **kwargs,
    )
