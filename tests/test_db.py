import json
import logging
import sqlite3

import pytest

import db
from conftest import make_member
from models import Member, Reminder


def sample_members():
    with_reminder = make_member(
        member_id="b",
        name="Ravi Kumar",
        email="ravi@example.com",
        notes="Second floor",
        payments=[("2024-02-01", 150.0), ("2024-03-01", 150.0)],
        reminders_sent=(Reminder(id="r1", date="2024-04-02", method="phone", message="Call back"),),
    )
    return [
        make_member(member_id="a", active=False),
        with_reminder,
    ]


def test_load_without_saved_data_is_empty(temp_db):
    assert db.load_members() == []


def test_round_trip(temp_db):
    members = sample_members()
    assert db.save_members(members) is True
    loaded = db.load_members()
    assert loaded == members
    assert [p.id for p in loaded[1].payment_history] == ["b-p0", "b-p1"]


def test_save_overwrites_previous_snapshot(temp_db):
    members = sample_members()
    db.save_members(members)
    db.save_members(members[:1])
    assert db.load_members() == members[:1]


def test_saved_json_uses_browser_field_names(temp_db):
    db.save_members(sample_members())
    data = json.loads(db.get_value(db.STORAGE_KEY))
    assert data[1]["subscriptionAmount"] == 100.0
    assert data[1]["paymentHistory"][0]["collectedBy"] == "Current User"
    assert data[1]["remindersSent"][0]["sentBy"] == "Current User"
    assert data[0]["isActive"] is False


def test_loads_browser_export(temp_db):
    db.init_db()
    exported = [{
        "id": "1718000000000",
        "name": "Meena",
        "address": "Lane 4",
        "phone": "98111",
        "email": "",
        "subscriptionAmount": 200,
        "startDate": "2024-01-01",
        "paymentHistory": [{
            "id": "1718000000001", "date": "2024-01-05", "amount": 200,
            "notes": "", "collectedBy": "Current User", "collectionMethod": "Cash",
        }],
        "remindersSent": [],
        "notes": "",
        "isActive": True,
    }]
    db.set_value(db.STORAGE_KEY, json.dumps(exported))
    loaded = db.load_members()
    assert len(loaded) == 1
    assert isinstance(loaded[0], Member)
    assert loaded[0].payment_history[0].amount == 200.0


def test_unparsable_data_is_ignored(temp_db, caplog):
    db.init_db()
    db.set_value(db.STORAGE_KEY, "{not json")
    with caplog.at_level(logging.WARNING):
        assert db.load_members() == []
    assert "unreadable" in caplog.text


def test_save_failure_is_logged_not_raised(temp_db, monkeypatch, caplog):
    def broken(key, value):
        raise sqlite3.OperationalError("database or disk is full")

    monkeypatch.setattr(db, "set_value", broken)
    with caplog.at_level(logging.ERROR):
        assert db.save_members(sample_members()) is False
    assert "Could not save" in caplog.text


def saved_record(**overrides):
    record = make_member(payments=[("2024-01-05", 100.0)]).to_dict()
    record.update(overrides)
    return record


@pytest.mark.parametrize(
    "record",
    [
        saved_record(startDate="05/01/2024"),
        saved_record(paymentHistory=[{"id": "p1", "date": "05/01/2024", "amount": 100}]),
        saved_record(remindersSent=[{"id": "r1", "date": "", "method": "sms"}]),
        saved_record(subscriptionAmount=float("nan")),
        saved_record(paymentHistory=[{"id": "p1", "date": "2024-01-05", "amount": "Infinity"}]),
        saved_record(isActive="false"),
    ],
)
def test_snapshot_with_bad_values_loads_empty(temp_db, record, caplog):
    db.init_db()
    db.set_value(db.STORAGE_KEY, json.dumps([record]))
    with caplog.at_level(logging.WARNING):
        assert db.load_members() == []
    assert "unreadable" in caplog.text
