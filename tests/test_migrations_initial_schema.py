import os
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config


PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(db_url: str) -> Config:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", db_url)
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    return config


@pytest.mark.no_smoke
def test_initial_schema_migration(tmp_path):
    db_path = tmp_path / "migration.sqlite"
    db_url = f"sqlite:///{db_path}"
    original_url = os.environ.get("DATABASE_URL")
    os.environ["DATABASE_URL"] = db_url
    config = _alembic_config(db_url)

    command.upgrade(config, "head")
    command.upgrade(config, "head")

    engine = sa.create_engine(db_url)
    try:
        with engine.begin() as conn:
            inspector = sa.inspect(conn)
            assert {"templates", "certificates", "system_config"} <= set(inspector.get_table_names())
            indexes = {ix["name"]: ix for ix in inspector.get_indexes("certificates")}
            assert indexes["uix_certificates_certificate_number"]["unique"]

            conn.execute(sa.text("INSERT INTO system_config (id) VALUES (1)"))
            row = conn.execute(
                sa.text("SELECT organization_name, prefix_participant FROM system_config WHERE id = 1")
            ).one()
            assert row == ("Politeknik ATI Padang", "SRT-PST/{YEAR}/")
    finally:
        engine.dispose()
        if original_url is None:
            os.environ.pop("DATABASE_URL", None)
        else:
            os.environ["DATABASE_URL"] = original_url
