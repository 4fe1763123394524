"""
Versioned schema migrations for the invoice database.

Migration files live next to this module as ``vNNN_<name>.sql`` and are
applied in version order. Each applied file is recorded in
``schema_migrations`` together with a content checksum so edits to an
already-applied file are detected.

Before touching an existing database a copy is taken with SQLite's online
backup API (safe while WAL readers are attached). The copy is restored if
any migration fails and removed once the run finishes.
"""

import hashlib
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from invoice_analytics.config import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

# Tables the reporting queries and chat-with-data schema description rely on
INVOICE_TABLES = (
    "documents",
    "vendors",
    "customers",
    "invoices",
    "line_items",
    "payment_details",
)
REQUIRED_TABLES = (*INVOICE_TABLES, "schema_migrations")

_FILENAME = re.compile(r"^v(?P<version>\d+)_(?P<name>\w+)\.sql$")


@dataclass(frozen=True)
class MigrationInfo:
    """One migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match["version"],
            name=match["name"],
            path=path,
            checksum=digest[:16],
        )

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class IntegrityCheck:
    check: str
    passed: bool
    detail: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {"check": self.check, "status": "PASS" if self.passed else "FAIL", **self.detail}


def discover_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``migrations_dir`` ordered by numeric version."""
    found = []
    for path in migrations_dir.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await _applied_checksums(conn)
    return max(applied, key=int) if applied else None


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _table_names(conn: aiosqlite.Connection) -> set[str]:
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row[0] for row in await cursor.fetchall()}


async def create_backup(db_path: Path) -> Path:
    """Copy the database to a timestamped sibling file."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix}")
    async with aiosqlite.connect(db_path) as source, aiosqlite.connect(backup_path) as target:
        await source.backup(target)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    """Overwrite ``db_path`` with the contents of ``backup_path``."""
    async with aiosqlite.connect(backup_path) as source, aiosqlite.connect(db_path) as target:
        await source.backup(target)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


class Migrator:
    """Applies and inspects schema migrations for one database file."""

    def __init__(self, db_path: Path, migrations_dir: Path = MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    async def _apply_one(
        self,
        conn: aiosqlite.Connection,
        migration: MigrationInfo,
    ) -> MigrationResult:
        logger.info("applying_migration", version=migration.version, name=migration.name)
        started = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            await conn.executescript(migration.read())
            await conn.execute(
                "INSERT OR REPLACE INTO schema_migrations "
                "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
                (migration.version, migration.name, migration.checksum, elapsed_ms()),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            logger.error("migration_failed", version=migration.version, error=str(e))
            return MigrationResult(
                migration.version, migration.name, False, elapsed_ms(), error=str(e)
            )

        logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed_ms())
        return MigrationResult(migration.version, migration.name, True, elapsed_ms())

    async def apply_pending(self) -> list[MigrationResult]:
        """Apply every migration not yet recorded; stop at the first failure."""
        migrations = discover_migrations(self.migrations_dir)
        if not migrations:
            logger.warning("no_migrations_found", migrations_dir=str(self.migrations_dir))
            return []

        results: list[MigrationResult] = []
        async with aiosqlite.connect(self.db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            applied = await _applied_checksums(conn)

            for migration in migrations:
                recorded = applied.get(migration.version)
                if recorded is not None:
                    if recorded != migration.checksum:
                        logger.warning("migration_checksum_changed", version=migration.version)
                    continue

                result = await self._apply_one(conn, migration)
                results.append(result)
                if not result.success:
                    break

                cursor = await conn.execute("PRAGMA foreign_key_check")
                if await cursor.fetchall():
                    results[-1] = MigrationResult(
                        migration.version,
                        migration.name,
                        False,
                        result.execution_time_ms,
                        error="foreign key violations after migration",
                    )
                    break
        return results

    async def status(self) -> dict[str, Any]:
        """Applied and pending versions plus row counts of the invoice tables."""
        discovered = discover_migrations(self.migrations_dir)
        if not self.db_path.exists():
            return {
                "exists": False,
                "current_version": None,
                "applied_migrations": [],
                "pending_migrations": [m.version for m in discovered],
                "row_counts": {},
            }

        async with aiosqlite.connect(self.db_path) as conn:
            applied = await _applied_checksums(conn)
            tables = await _table_names(conn)
            row_counts = {}
            for table in INVOICE_TABLES:
                if table in tables:
                    cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")
                    row_counts[table] = (await cursor.fetchone())[0]

        return {
            "exists": True,
            "current_version": max(applied, key=int) if applied else None,
            "applied_migrations": sorted(applied, key=int),
            "pending_migrations": [m.version for m in discovered if m.version not in applied],
            "row_counts": row_counts,
        }

    async def verify(self) -> list[IntegrityCheck]:
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute("PRAGMA foreign_key_check")
            violations = await cursor.fetchall()

            cursor = await conn.execute("PRAGMA integrity_check")
            integrity = (await cursor.fetchone())[0]

            missing = [t for t in REQUIRED_TABLES if t not in await _table_names(conn)]

        return [
            IntegrityCheck("foreign_keys", not violations, {"violations": len(violations)}),
            IntegrityCheck("integrity", integrity == "ok", {"result": integrity}),
            IntegrityCheck("required_tables", not missing, {"missing": missing}),
        ]


async def run_migrations(
    db_path: Path,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Bring the database at ``db_path`` up to the latest schema.

    Args:
        db_path: Database file; created along with its directory if missing
        create_backup_before: Back up an existing file and restore it on failure
        migrations_dir: Directory holding the vNNN_*.sql files

    Returns:
        One result per migration attempted (empty when already current)
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = await create_backup(db_path)

    try:
        results = await Migrator(db_path, migrations_dir).apply_pending()
    except aiosqlite.Error as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            await restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        if not all(r.success for r in results):
            await restore_backup(db_path, backup_path)
        backup_path.unlink()
    return results


initialize_database = run_migrations


async def get_migration_status(db_path: Path) -> dict[str, Any]:
    return await Migrator(db_path).status()


async def verify_schema_integrity(db_path: Path) -> list[dict[str, Any]]:
    """Foreign key, page integrity and required-table checks as plain dicts."""
    return [check.as_dict() for check in await Migrator(db_path).verify()]
