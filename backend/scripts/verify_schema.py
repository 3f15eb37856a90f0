"""Print the SQLite schema after migrations (tables, columns, indexes, applied migrations)."""
import sqlite3
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND))

from app.db.connection import get_db_path  # noqa: E402

REQUIRED_TABLES = {
    "oauth_tokens": {"session_id", "access_token", "created_at"},
    "schema_version": {"migration_name", "applied_at"},
}


def describe_schema(db_path: str) -> dict[str, list[tuple[str, str, bool, bool]]]:
    """Map table name -> [(column, type, not_null, primary_key), ...]."""
    conn = sqlite3.connect(db_path)
    try:
        tables = [
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        ]
        return {
            table: [(c[1], c[2], bool(c[3]), bool(c[5])) for c in conn.execute(f"PRAGMA table_info({table})")]
            for table in tables
        }
    finally:
        conn.close()


def missing_columns(schema: dict[str, list[tuple[str, str, bool, bool]]]) -> dict[str, set[str]]:
    """Required columns absent from the schema, per table (empty dict when the schema is complete)."""
    missing = {}
    for table, required in REQUIRED_TABLES.items():
        present = {column[0] for column in schema.get(table, [])}
        if required - present:
            missing[table] = required - present
    return missing


def main():
    db_path = sys.argv[1] if len(sys.argv) > 1 else get_db_path()
    if not Path(db_path).exists():
        print(f"Database not found: {db_path}")
        sys.exit(1)

    schema = describe_schema(db_path)
    print("Tables:", list(schema))
    for table, columns in schema.items():
        print(f"\n--- {table} ---")
        for name, type_, not_null, pk in columns:
            print(f"   {name} {type_}{' NOT NULL' if not_null else ''}{' PK' if pk else ''}")

    conn = sqlite3.connect(db_path)
    try:
        if "schema_version" in schema:
            print("\nschema_version:")
            for name, applied_at in conn.execute(
                "SELECT migration_name, applied_at FROM schema_version ORDER BY applied_at"
            ):
                print(" ", name, "|", applied_at)
    finally:
        conn.close()

    missing = missing_columns(schema)
    if missing:
        for table, columns in missing.items():
            print(f"\nMissing in {table}: {sorted(columns)}")
        sys.exit(1)
    print("\nSchema verified.")


if __name__ == "__main__":
    main()
