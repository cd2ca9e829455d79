import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.settings import load_settings


class SettingsTests(unittest.TestCase):
    def test_defaults_when_file_missing(self):
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("DASHBOARD_API_BASE_URL", None)
            os.environ.pop("DASHBOARD_DB_URL", None)
            s = load_settings("/nonexistent/settings.yaml")
        self.assertEqual(s.api.base_url, "http://localhost:8000/api")
        self.assertEqual(s.api.timeout_seconds, 30)
        self.assertEqual(s.ui.page_size, 10)
        self.assertEqual(s.ui.search_debounce_ms, 300)
        self.assertEqual(s.ui.preview_rows, 10)
        self.assertFalse(s.app.debug)

    def test_yaml_then_env_overrides(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.yaml"
            path.write_text(
                "app:\n  debug: true\napi:\n  base_url: http://yaml/api\nui:\n  page_size: 25\n",
                encoding="utf-8",
            )
            env = {"DASHBOARD_API_BASE_URL": "http://env/api", "DASHBOARD_DB_URL": "sqlite://"}
            with mock.patch.dict(os.environ, env):
                s = load_settings(path)
        self.assertTrue(s.app.debug)
        self.assertEqual(s.ui.page_size, 25)
        self.assertEqual(s.api.base_url, "http://env/api")
        self.assertEqual(s.db.url, "sqlite://")

    def test_settings_path_from_env(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "alt.yaml"
            path.write_text("api:\n  timeout_seconds: 5\n", encoding="utf-8")
            with mock.patch.dict(os.environ, {"DASHBOARD_SETTINGS": str(path)}):
                s = load_settings()
        self.assertEqual(s.api.timeout_seconds, 5)
