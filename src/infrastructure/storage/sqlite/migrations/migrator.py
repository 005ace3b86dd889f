"""
Versioned SQL migrations for the ledger database.

Files named ``vNNN_name.sql`` are applied in version order, each exactly
once, and recorded with a checksum in ``schema_migrations``. Any failure
stops the run with ``DatabaseError``; when a backup was taken it is
copied back over the database first.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import configure_logging, get_logger, get_settings
from src.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "items",
    "inventory_transactions",
    "recipes",
    "recipe_ingredients",
    "orders",
    "order_items",
    "financial_records",
    "schema_migrations",
)


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = re.match(r"v(\d+)_(.+)\.sql$", path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        content = path.read_text(encoding="utf-8")
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=hashlib.sha256(content.encode()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    """A migration applied during this run."""

    version: str
    name: str
    execution_time_ms: int


async def ensure_migrations_table(conn: aiosqlite.Connection) -> None:
    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            checksum TEXT NOT NULL,
            execution_time_ms INTEGER,
            applied_at TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """
    )
    await conn.commit()


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum recorded for each."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
        return {row[0]: row[1] for row in await cursor.fetchall()}
    except aiosqlite.OperationalError:
        # No schema_migrations table yet
        return {}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    try:
        cursor = await conn.execute(
            "SELECT version FROM schema_migrations ORDER BY version DESC LIMIT 1"
        )
        row = await cursor.fetchone()
        return row[0] if row else None
    except aiosqlite.OperationalError:
        return None


def discover_migrations(directory: Path | None = None) -> list[MigrationInfo]:
    """Migration files in version order; badly named files are skipped."""
    migrations = []
    for path in sorted((directory or MIGRATIONS_DIR).glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """
    Run one migration script and record it.

    Raises:
        DatabaseError: The script failed, or it left foreign key violations.
    """
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start_time = time.time()

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        if violations:
            raise DatabaseError(
                f"migration {migration.version}",
                f"{len(violations)} foreign key violations",
            )

        execution_time = int((time.time() - start_time) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, execution_time),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        raise DatabaseError(f"migration {migration.version}", str(e)) from e

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=execution_time,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        execution_time_ms=execution_time,
    )


def create_backup(db_path: Path) -> Path:
    """Copy the database file aside before migrating."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{timestamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def _migrate(db_path: Path, migrations: list[MigrationInfo]) -> list[MigrationResult]:
    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await ensure_migrations_table(conn)

        applied = await get_applied_migrations(conn)
        for migration in migrations:
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    raise DatabaseError(
                        f"migration {migration.version}",
                        "file changed after it was applied",
                    )
                continue
            results.append(await apply_migration(conn, migration))

        logger.info(
            "database_ready",
            version=await get_current_version(conn),
            applied=len(results),
        )
    return results


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path | None = None,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema version.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Back up an existing file first and restore
            it if any migration fails
        migrations_dir: Directory holding vNNN_*.sql files (default: this package)

    Returns:
        The migrations applied in this run, empty when already current

    Raises:
        DatabaseError: A migration failed or an applied one was edited.
    """
    settings = get_settings()
    db_path = db_path or settings.storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("initializing_database", db_path=str(db_path))

    migrations = discover_migrations(migrations_dir)
    if not migrations:
        raise DatabaseError("migrate", "no migration files found")

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    try:
        results = await _migrate(db_path, migrations)
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        backup_path.unlink()
        logger.info("backup_cleaned_up")
    return results


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version plus applied and pending migrations."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        return {
            "exists": True,
            "current_version": await get_current_version(conn),
            "applied_migrations": list(applied),
            "pending_migrations": [m.version for m in discovered if m.version not in applied],
        }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Foreign key, integrity and required-table checks."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = await cursor.fetchall()

        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        existing = {row[0] for row in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in existing]
    return [
        {
            "check": "foreign_keys",
            "status": "PASS" if not fk_violations else "FAIL",
            "violations": len(fk_violations),
        },
        {
            "check": "integrity",
            "status": "PASS" if integrity == "ok" else "FAIL",
            "result": integrity,
        },
        {
            "check": "required_tables",
            "status": "PASS" if not missing else "FAIL",
            "missing": missing,
        },
    ]


def main() -> None:
    """CLI entry point: ``ledger-migrate [--status | --verify]``."""
    import argparse

    parser = argparse.ArgumentParser(description="Inventory ledger database migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    parser.add_argument("--status", action="store_true", help="Show migration status")
    parser.add_argument("--verify", action="store_true", help="Verify schema integrity")
    parser.add_argument(
        "--no-backup", action="store_true", help="Skip backup before migrations"
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    args = parser.parse_args()

    configure_logging(log_level=args.log_level)

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status['exists']}")
            print(f"Current version: {status['current_version'] or 'N/A'}")
            print(f"Applied migrations: {status['applied_migrations']}")
            print(f"Pending migrations: {status['pending_migrations']}")
            return 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                print(f"[{check['status']}] {check['check']}")
                for key, value in check.items():
                    if check["status"] != "PASS" and key not in ("check", "status"):
                        print(f"       {key}: {value}")
            return 0 if all(c["status"] == "PASS" for c in checks) else 1

        try:
            results = await initialize_database(
                args.db_path,
                create_backup_before=not args.no_backup,
            )
        except DatabaseError as e:
            print(f"[FAILED] {e.message}")
            return 1
        if not results:
            print("Database is up to date")
        for result in results:
            print(f"[APPLIED] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        return 0

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
