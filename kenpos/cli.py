"""
KenPOS management CLI.

Usage:
    kenpos serve                 Start the API server
    kenpos migrate               Apply pending database migrations
    kenpos migrate --status      Show applied and pending migrations
    kenpos sync                  Push queued offline sales once
    kenpos backup FILE           Export all data to a JSON file
    kenpos restore FILE          Replace data from a JSON backup
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from kenpos.config import configure_logging, get_settings
from kenpos.core.exceptions import KenPOSError

CLI_USER = "cli"


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn in the foreground."""
    import uvicorn

    print(f"Starting server on {args.host}:{args.port}...")
    uvicorn.run(
        "kenpos.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


async def _migrate(status_only: bool) -> int:
    from kenpos.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        initialize_database,
    )

    if status_only:
        status = await get_migration_status()
        print(json.dumps(status, indent=2, default=str))
        return 0

    results = await initialize_database()
    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version}: {state}")
    if not results:
        print("Database is up to date.")
    return 0 if all(r.success for r in results) else 1


def cmd_migrate(args: argparse.Namespace) -> int:
    return asyncio.run(_migrate(args.status))


async def _with_store(work):
    from kenpos.infrastructure.storage.sqlite import close_pool
    from kenpos.infrastructure.storage.sqlite.migrations import initialize_database
    from kenpos.infrastructure.sync import close_sync_endpoint

    await initialize_database()
    try:
        return await work()
    finally:
        await close_sync_endpoint()
        await close_pool()


def cmd_sync(args: argparse.Namespace) -> int:
    from kenpos.application.use_cases import SyncOfflineSalesUseCase

    report = asyncio.run(_with_store(SyncOfflineSalesUseCase().execute))
    print(f"Synced {report.success_count} sale(s), {report.failed_count} failed.")
    return 0 if report.failed_count == 0 else 1


def cmd_backup(args: argparse.Namespace) -> int:
    from kenpos.application.use_cases import BackupRestoreUseCase

    payload = asyncio.run(_with_store(lambda: BackupRestoreUseCase().backup(CLI_USER)))
    Path(args.file).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    total = sum(len(records) for records in payload["collections"].values())
    print(f"Backup written to {args.file} ({total} records).")
    return 0


def cmd_restore(args: argparse.Namespace) -> int:
    from kenpos.application.use_cases import BackupRestoreUseCase

    try:
        payload = json.loads(Path(args.file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: cannot read backup {args.file}: {e}")
        return 1

    counts = asyncio.run(
        _with_store(lambda: BackupRestoreUseCase().restore(payload, CLI_USER))
    )
    for collection, count in counts.items():
        print(f"  {collection}: {count}")
    print("Restore complete.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="kenpos",
        description="KenPOS management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=settings.api.host, help="Bind host")
    p_serve.add_argument("--port", type=int, default=settings.api.port, help="Bind port")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--status", action="store_true", help="Only show migration status")
    p_migrate.set_defaults(func=cmd_migrate)

    # sync
    p_sync = sub.add_parser("sync", help="Push queued offline sales")
    p_sync.set_defaults(func=cmd_sync)

    # backup
    p_backup = sub.add_parser("backup", help="Export all data to JSON")
    p_backup.add_argument("file", help="Output file")
    p_backup.set_defaults(func=cmd_backup)

    # restore
    p_restore = sub.add_parser("restore", help="Replace data from a JSON backup")
    p_restore.add_argument("file", help="Backup file")
    p_restore.set_defaults(func=cmd_restore)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args) or 0
    except KenPOSError as e:
        print(f"Error [{e.code}]: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
