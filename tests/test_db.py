import os
from unittest.mock import MagicMock, patch

import invoicer.db as db_module


class TestGetEngine:
    def test_creates_engine(self, monkeypatch):
        monkeypatch.setattr(db_module, "_engine", None)
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = "sqlite:///:memory:"
            engine = db_module.get_engine()
            assert engine is not None
            assert db_module._engine is engine

    def test_returns_cached_engine(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_engine", sentinel)
        assert db_module.get_engine() is sentinel


class TestOpenConnection:
    def test_opens_new_connection_each_call(self):
        mock_engine = MagicMock()
        mock_engine.connect.side_effect = [MagicMock(), MagicMock()]
        with patch.object(db_module, "get_engine", return_value=mock_engine):
            first = db_module.open_connection()
            second = db_module.open_connection()
        assert first is not second
        assert mock_engine.connect.call_count == 2


class TestAlembicConfig:
    def test_script_location_points_at_project(self):
        cfg = db_module._get_alembic_config()
        project_root = os.path.dirname(os.path.dirname(db_module.__file__))
        assert cfg.get_main_option("script_location") == os.path.join(project_root, "alembic")


class TestInitializeDb:
    def test_runs_upgrade_head(self):
        with patch.object(db_module, "command") as mock_command:
            db_module.initialize_db()
        args = mock_command.upgrade.call_args[0]
        assert args[1] == "head"

    def test_migrations_build_schema(self, tmp_path, monkeypatch):
        from sqlalchemy import create_engine, inspect

        url = f"sqlite:///{tmp_path / 'test.db'}"
        monkeypatch.setattr(db_module.settings, "db_url", url)
        db_module.initialize_db()

        tables = set(inspect(create_engine(url)).get_table_names())
        assert {"company_profiles", "clients", "invoices", "invoice_items", "invoice_counter"} <= tables
