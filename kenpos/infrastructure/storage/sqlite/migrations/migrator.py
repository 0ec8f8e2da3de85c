"""
Schema migrator for the KenPOS record store.

Migrations are ``vNNN_<name>.sql`` files next to this module. Each one is
applied once, recorded in ``schema_migrations`` with a checksum, and never
edited afterwards. Before touching an existing database a snapshot is taken
with SQLite's online backup so a failed upgrade can be rolled back without
losing sales recorded while offline.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from kenpos.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(?P<version>\d{3,})_(?P<name>\w+)\.sql$")

REQUIRED_TABLES = ("records", "schema_migrations")


@dataclass(frozen=True)
class MigrationInfo:
    """One migration script on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if match is None:
            raise ValueError(f"not a migration script: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match["version"],
            name=match["name"],
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration scripts ordered by version."""
    found = []
    for path in migrations_dir.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("migration_file_ignored", path=str(path), reason=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> recorded checksum. Empty for a blank database."""
    if not await _table_exists(conn, "schema_migrations"):
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied, key=int) if applied else None


async def _table_exists(conn: aiosqlite.Connection, table: str) -> bool:
    cursor = await conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    )
    return await cursor.fetchone() is not None


async def _invalid_payload_count(conn: aiosqlite.Connection) -> int:
    if not await _table_exists(conn, "records"):
        return 0
    cursor = await conn.execute("SELECT COUNT(*) FROM records WHERE NOT json_valid(payload)")
    (count,) = await cursor.fetchone()
    return count


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one script and record it.

    ``executescript`` commits as it goes, so a failure part way through is
    undone by restoring the pre-migration snapshot, not by rollback.
    """
    logger.info("migration_started", version=migration.version, name=migration.name)
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed_ms(), str(e))

    result = MigrationResult(migration.version, migration.name, True, elapsed_ms())
    logger.info(
        "migration_complete",
        version=migration.version,
        execution_time_ms=result.execution_time_ms,
    )
    return result


def _backup_path(db_path: Path) -> Path:
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    return db_path.parent / "backups" / f"{db_path.stem}-premigration-{stamp}.db"


async def create_backup(db_path: Path) -> Path:
    """Snapshot the live database (WAL included) with the online backup API."""
    target = _backup_path(db_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    async with aiosqlite.connect(db_path) as source, aiosqlite.connect(target) as dest:
        await source.backup(dest)
    logger.info("database_snapshot_created", path=str(target))
    return target


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    async with aiosqlite.connect(backup_path) as source, aiosqlite.connect(db_path) as dest:
        await source.backup(dest)
    logger.warning("database_restored_from_snapshot", path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """Bring the database up to the latest schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Snapshot an existing database before migrating

    Returns:
        Results for the migrations applied by this call; empty when the
        schema was already current.

    Raises:
        RuntimeError: When an applied migration script was edited.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        applied = await get_applied_migrations(conn)

    pending = []
    for migration in discover_migrations():
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise RuntimeError(
                f"migration v{migration.version} changed after it was applied "
                f"(recorded {recorded}, found {migration.checksum})"
            )

    if not pending:
        logger.info("database_schema_current", db_path=str(db_path))
        return []

    snapshot = None
    if create_backup_before and applied:
        snapshot = await create_backup(db_path)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        for migration in pending:
            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break
            invalid = await _invalid_payload_count(conn)
            if invalid:
                results[-1] = MigrationResult(
                    result.version,
                    result.name,
                    False,
                    result.execution_time_ms,
                    f"{invalid} record(s) hold invalid JSON after migration",
                )
                break

    if all(r.success for r in results):
        if snapshot is not None:
            snapshot.unlink()
        logger.info("database_migrated", db_path=str(db_path), applied=len(results))
    elif snapshot is not None:
        await restore_backup(db_path, snapshot)

    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions plus record counts per collection."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
            "total_migrations": len(discovered),
            "record_counts": {},
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        counts: dict[str, int] = {}
        if await _table_exists(conn, "records"):
            cursor = await conn.execute(
                "SELECT collection, COUNT(*) FROM records GROUP BY collection ORDER BY collection"
            )
            counts = {collection: n for collection, n in await cursor.fetchall()}

    return {
        "exists": True,
        "current_version": max(applied, key=int) if applied else None,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
        "record_counts": counts,
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """PRAGMA integrity_check, required tables and JSON validity of payloads."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()
        missing = [t for t in REQUIRED_TABLES if not await _table_exists(conn, t)]
        invalid = await _invalid_payload_count(conn)

    def status(ok: bool) -> str:
        return "PASS" if ok else "FAIL"

    return [
        {"check": "integrity", "status": status(integrity == "ok"), "result": integrity},
        {"check": "required_tables", "status": status(not missing), "missing": missing},
        {"check": "json_payloads", "status": status(invalid == 0), "invalid": invalid},
    ]
