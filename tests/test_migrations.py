from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.models import Base

ROOT = Path(__file__).resolve().parents[1]


def test_initial_migration_creates_every_model_index(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))

    command.upgrade(config, "head")

    inspector = inspect(create_engine(f"sqlite:///{db_file}"))
    for table in Base.metadata.sorted_tables:
        created = {tuple(index["column_names"]) for index in inspector.get_indexes(table.name)}
        declared = {tuple(index.columns.keys()) for index in table.indexes}
        assert declared <= created, f"{table.name} is missing {declared - created}"
