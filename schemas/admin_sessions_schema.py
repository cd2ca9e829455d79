from sqlalchemy import text as T
from core.schema_registry import register

@register
def install_admin_sessions(engine):
    """Single-row store for the signed-in admin's bearer token and profile."""
    with engine.begin() as c:
        c.execute(T("""
        CREATE TABLE IF NOT EXISTS admin_sessions(
          id INTEGER PRIMARY KEY CHECK (id = 1),
          token TEXT NOT NULL,
          user_json TEXT,
          saved_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )"""))
