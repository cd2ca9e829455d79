# core/session_store.py
from __future__ import annotations
import json
import logging
from typing import Optional
from sqlalchemy import text as sql_text

from core.auth import AdminSession

logger = logging.getLogger(__name__)


def save(engine, session: AdminSession) -> None:
    with engine.begin() as conn:
        conn.execute(sql_text("""
            INSERT INTO admin_sessions (id, token, user_json)
            VALUES (1, :token, :user)
            ON CONFLICT(id) DO UPDATE
            SET token=excluded.token, user_json=excluded.user_json, saved_at=CURRENT_TIMESTAMP
        """), dict(token=session.token, user=json.dumps(session.user or {}, ensure_ascii=False)))


def load(engine) -> Optional[AdminSession]:
    with engine.begin() as conn:
        row = conn.execute(sql_text(
            "SELECT token, user_json FROM admin_sessions WHERE id = 1"
        )).fetchone()
    if not row or not row[0]:
        return None
    try:
        user = json.loads(row[1]) if row[1] else {}
    except ValueError:
        # unreadable profile means the stored session is unusable
        logger.warning("Discarding stored session with unreadable user profile")
        clear(engine)
        return None
    return AdminSession(token=row[0], user=user)


def clear(engine) -> None:
    with engine.begin() as conn:
        conn.execute(sql_text("DELETE FROM admin_sessions"))
