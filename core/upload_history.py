# core/upload_history.py
from __future__ import annotations
from typing import Optional
import pandas as pd
from sqlalchemy import text as sql_text


def record(engine, resource: str, file_name: str, status: str, message: str = "",
           client_rows: Optional[int] = None, client_dropped: Optional[int] = None,
           inserted_count: Optional[int] = None, uploaded_by: Optional[str] = None) -> None:
    with engine.begin() as conn:
        conn.execute(sql_text("""
            INSERT INTO upload_history
                (resource, file_name, client_rows, client_dropped, inserted_count, status, message, uploaded_by)
            VALUES (:resource, :file_name, :client_rows, :client_dropped, :inserted_count, :status, :message, :uploaded_by)
        """), dict(
            resource=resource, file_name=file_name,
            client_rows=client_rows, client_dropped=client_dropped,
            inserted_count=inserted_count, status=status,
            message=message, uploaded_by=uploaded_by,
        ))


def recent(engine, resource: Optional[str] = None, limit: int = 50) -> pd.DataFrame:
    sql = """
        SELECT at, resource, file_name, status, client_rows, client_dropped,
               inserted_count, message, uploaded_by
        FROM upload_history
    """
    params = {"limit": int(limit)}
    if resource:
        sql += " WHERE resource = :resource"
        params["resource"] = resource
    sql += " ORDER BY id DESC LIMIT :limit"
    with engine.begin() as conn:
        return pd.read_sql(sql_text(sql), conn, params=params)
