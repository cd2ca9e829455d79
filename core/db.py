# core/db.py
from __future__ import annotations
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from core.schema_registry import auto_discover, run_all

def get_engine(db_url: str):
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every checkout gets an empty database
        return create_engine(
            db_url, future=True,
            connect_args={"check_same_thread": False}, poolclass=StaticPool,
        )
    if db_url.startswith("sqlite:///"):
        db_file = db_url.replace("sqlite:///", "")
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(db_url, future=True)

def init_db(engine):
    # import every schemas/*.py so their installers register, then run them
    auto_discover("schemas")
    run_all(engine)
