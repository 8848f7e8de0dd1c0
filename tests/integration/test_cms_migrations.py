import sqlite3
from pathlib import Path

import pytest

from corpsite.adapters.sqlite.migrator import SQLiteMigrator

MIGRATIONS_DIR = str(Path(__file__).resolve().parents[2] / "migrations")


@pytest.fixture
def db_file(tmp_path):
    return str(tmp_path / "migrate.db")


def _tables(db_file: str) -> set[str]:
    conn = sqlite3.connect(db_file)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    finally:
        conn.close()
    return {r[0] for r in rows}


def test_applies_all_migrations(db_file):
    applied = SQLiteMigrator(db_file, MIGRATIONS_DIR).run_migrations()

    assert applied == ["001_cms_content.sql", "002_ordered_lists.sql"]
    assert {
        "_migrations",
        "cms_content",
        "hero_slides",
        "offerings",
        "statistics",
        "regulatory_approvals",
    } <= _tables(db_file)


def test_second_run_is_noop(db_file):
    migrator = SQLiteMigrator(db_file, MIGRATIONS_DIR)
    migrator.run_migrations()
    assert migrator.pending() == []
    assert migrator.run_migrations() == []


def test_down_section_not_executed(tmp_path, db_file):
    mig_dir = tmp_path / "migs"
    mig_dir.mkdir()
    (mig_dir / "001_t.sql").write_text(
        "-- Up\nCREATE TABLE t (id INTEGER);\n\n-- Down\nDROP TABLE t;\n"
    )
    SQLiteMigrator(db_file, str(mig_dir)).run_migrations()
    assert "t" in _tables(db_file)


def test_broken_migration_raises(tmp_path, db_file):
    mig_dir = tmp_path / "migs"
    mig_dir.mkdir()
    (mig_dir / "001_bad.sql").write_text("CREATE TABLE (;")
    migrator = SQLiteMigrator(db_file, str(mig_dir))

    with pytest.raises(RuntimeError, match="001_bad.sql"):
        migrator.run_migrations()
    assert migrator.pending() == ["001_bad.sql"]


def test_page_section_unique(db_file):
    SQLiteMigrator(db_file, MIGRATIONS_DIR).run_migrations()
    conn = sqlite3.connect(db_file)
    try:
        insert = (
            "INSERT INTO cms_content (page, section, data, created_at, updated_at) "
            "VALUES ('about', 'hero', '{}', 'now', 'now')"
        )
        conn.execute(insert)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(insert)
    finally:
        conn.close()
