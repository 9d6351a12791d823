"""
db.py
SQLite helpers + the member snapshot (whole collection as JSON under one key).
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from models import Member

DB_FILE = Path(__file__).with_name("members.db")
STORAGE_KEY = "members"


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def fetch_one(sql: str, params: tuple = ()):
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def init_db() -> None:
    execute(
        """
        CREATE TABLE IF NOT EXISTS app_storage (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )


def get_value(key: str, default: str | None = None) -> str | None:
    row = fetch_one("SELECT value FROM app_storage WHERE key = ?", (key,))
    if row:
        return str(row["value"])
    return default


def set_value(key: str, value: str) -> None:
    execute(
        """
        INSERT INTO app_storage(key, value) VALUES(?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value
        """,
        (key, value),
    )


def load_members() -> list[Member]:
    """
    Load the saved collection. Missing or unreadable data gives an empty list.
    """
    try:
        init_db()
        raw = get_value(STORAGE_KEY)
    except sqlite3.Error:
        logging.exception(f"Could not read member data from {DB_FILE}")
        return []
    if raw is None:
        return []
    try:
        return [Member.from_dict(item) for item in json.loads(raw)]
    except (ValueError, TypeError, KeyError) as e:
        logging.warning(f"Ignoring unreadable member data under key '{STORAGE_KEY}': {e}")
        return []


def save_members(members) -> bool:
    """
    Overwrite the saved collection. Failures are logged; returns False.
    """
    payload = json.dumps([m.to_dict() for m in members], ensure_ascii=False)
    try:
        init_db()
        set_value(STORAGE_KEY, payload)
    except (sqlite3.Error, OSError):
        logging.exception(f"Could not save {len(payload)} bytes of member data to {DB_FILE}")
        return False
    return True
