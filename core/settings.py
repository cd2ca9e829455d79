from __future__ import annotations
import os
import yaml
from pathlib import Path
from pydantic import BaseModel

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[1] / "config" / "settings.yaml"

class AppConfig(BaseModel):
    name: str = "Institute Admin Dashboard"
    environment: str = "development"
    debug: bool = False

class ApiConfig(BaseModel):
    base_url: str = "http://localhost:8000/api"
    timeout_seconds: float = 30

class UiConfig(BaseModel):
    page_size: int = 10
    search_debounce_ms: int = 300
    preview_rows: int = 10

class DBConfig(BaseModel):
    url: str = "sqlite:///data/dashboard.db"

class Settings(BaseModel):
    app: AppConfig = AppConfig()
    api: ApiConfig = ApiConfig()
    ui: UiConfig = UiConfig()
    db: DBConfig = DBConfig()

def load_settings(path: str | Path | None = None) -> Settings:
    """Read the YAML settings file, then apply DASHBOARD_* environment overrides."""
    path = path or os.environ.get("DASHBOARD_SETTINGS") or DEFAULT_SETTINGS_PATH
    data: dict = {}
    if Path(path).exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    settings = Settings(
        app=AppConfig(**(data.get("app") or {})),
        api=ApiConfig(**(data.get("api") or {})),
        ui=UiConfig(**(data.get("ui") or {})),
        db=DBConfig(**(data.get("db") or {})),
    )

    base_url = os.environ.get("DASHBOARD_API_BASE_URL")
    if base_url:
        settings.api.base_url = base_url
    db_url = os.environ.get("DASHBOARD_DB_URL")
    if db_url:
        settings.db.url = db_url
    return settings
