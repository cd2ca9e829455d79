import unittest

from sqlalchemy import text as sql_text

from core import schema_registry
from core.db import get_engine, init_db


class SchemaRegistryTests(unittest.TestCase):
    def test_discovered_installers_create_tables(self):
        engine = get_engine("sqlite://")
        init_db(engine)
        self.assertIn("install_upload_history", schema_registry.installers())
        with engine.begin() as conn:
            names = {r[0] for r in conn.execute(sql_text("SELECT name FROM sqlite_master WHERE type='table'"))}
        self.assertTrue({"admin_sessions", "upload_history"} <= names)

    def test_init_db_is_repeatable(self):
        engine = get_engine("sqlite://")
        init_db(engine)
        init_db(engine)

    def test_register_forms(self):
        before = len(schema_registry.installers())

        @schema_registry.register("test_named_installer")
        def _a(engine):
            pass

        schema_registry.register("test_named_installer", lambda engine: None)
        self.assertEqual(len(schema_registry.installers()), before + 1)
        with self.assertRaises(TypeError):
            schema_registry.register(42)
