"""
Apply SQLite migrations from backend/migrations/*.sql in file-name order.
Uses DATABASE_URL or ./imagefeed.db. Applied migrations are tracked in schema_version.
"""
import sqlite3
import sys
from pathlib import Path

# backend/scripts -> backend
BACKEND = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = BACKEND / "migrations"
sys.path.insert(0, str(BACKEND))

from app.db.connection import get_db_path  # noqa: E402


def run_migrations(db_path: str, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending migrations; returns the names applied in this run."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("""
            create table if not exists schema_version (
                migration_name text primary key,
                applied_at text not null default (datetime('now'))
            )
        """)
        conn.commit()

        applied = {row[0] for row in conn.execute("select migration_name from schema_version").fetchall()}
        newly_applied = []
        for path in sorted(migrations_dir.glob("*.sql")):
            if path.name in applied:
                continue
            conn.executescript(path.read_text(encoding="utf-8"))
            conn.execute("insert into schema_version (migration_name) values (?)", (path.name,))
            conn.commit()
            newly_applied.append(path.name)
            print(f"Applied: {path.name}")
    finally:
        conn.close()
    return newly_applied


def main() -> None:
    run_migrations(get_db_path())
    print("Migrations done.")


if __name__ == "__main__":
    main()
