# -*- coding: utf-8 -*-
"""
Unit тест миграций Alembic: схема совпадает с ORM моделями
"""

from pathlib import Path

from sqlalchemy import create_engine, inspect

from alembic import command
from alembic.config import Config
from edutest.config.settings import settings
from edutest.domain.models import Base

ROOT = Path(__file__).resolve().parents[2]


def test_upgrade_and_downgrade(tmp_path, monkeypatch):
    db_path = tmp_path / "migrations.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_path}")
    config = Config(str(ROOT / "alembic.ini"))

    command.upgrade(config, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            columns = {column["name"] for column in inspector.get_columns(name)}
            assert columns == set(table.columns.keys())
    finally:
        engine.dispose()

    command.downgrade(config, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    finally:
        engine.dispose()
