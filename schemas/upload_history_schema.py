from sqlalchemy import text as T
from core.schema_registry import register

@register
def install_upload_history(engine):
    """One row per CSV upload attempt, successful or not."""
    with engine.begin() as c:
        c.execute(T("""
        CREATE TABLE IF NOT EXISTS upload_history(
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          resource TEXT NOT NULL,
          file_name TEXT NOT NULL,
          client_rows INTEGER,
          client_dropped INTEGER,
          inserted_count INTEGER,
          status TEXT NOT NULL,
          message TEXT,
          uploaded_by TEXT,
          at DATETIME DEFAULT CURRENT_TIMESTAMP
        )"""))
        c.execute(T(
            "CREATE INDEX IF NOT EXISTS idx_upload_history_resource ON upload_history(resource, at)"
        ))
