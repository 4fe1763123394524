#!/usr/bin/env python3
"""
Invoice analytics management CLI.

Usage:
    python manage.py serve               Start the API server
    python manage.py migrate             Apply pending schema migrations
    python manage.py migrate --status    Show applied and pending migrations
    python manage.py migrate --verify    Run schema integrity checks
    python manage.py seed FILE [--reset] Load a JSON export of invoice records
"""

import argparse
import asyncio
import sys
from dataclasses import asdict
from pathlib import Path

from invoice_analytics.config import configure_logging, get_settings
from invoice_analytics.core.exceptions import InvoiceAnalyticsError


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port

    print(f"Starting server on {host}:{port}...")
    uvicorn.run(
        "invoice_analytics.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload or settings.api.debug,
    )


async def _migrate(args: argparse.Namespace) -> int:
    from invoice_analytics.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        initialize_database,
        verify_schema_integrity,
    )

    db_path = get_settings().storage.db_path

    if args.status:
        status = await get_migration_status(db_path)
        print(f"Database:  {db_path} ({'exists' if status['exists'] else 'missing'})")
        print(f"Current:   {status['current_version'] or '-'}")
        print(f"Applied:   {', '.join(status['applied_migrations']) or '-'}")
        print(f"Pending:   {', '.join(status['pending_migrations']) or '-'}")
        for table, count in status["row_counts"].items():
            print(f"  {table:<16} {count}")
        return 0

    if args.verify:
        checks = await verify_schema_integrity(db_path)
        for check in checks:
            print(f"{check['check']:<18} {check['status']}")
        return 0 if all(c["status"] == "PASS" for c in checks) else 1

    results = await initialize_database(db_path, create_backup_before=not args.no_backup)
    for result in results:
        state = "ok" if result.success else f"FAILED ({result.error})"
        print(f"{result.version}: {state}")
    if not results:
        print("Database is up to date.")
    return 0 if all(r.success for r in results) else 1


def cmd_migrate(args: argparse.Namespace) -> None:
    sys.exit(asyncio.run(_migrate(args)))


async def _seed(path: Path, reset: bool) -> int:
    from invoice_analytics.application.use_cases import SeedInvoicesUseCase
    from invoice_analytics.infrastructure.storage.sqlite import (
        ConnectionPool,
        SQLiteIngestStore,
        run_migrations,
    )

    settings = get_settings()
    await run_migrations(settings.storage.db_path)

    pool = ConnectionPool.from_settings(settings.storage)
    try:
        summary = await SeedInvoicesUseCase(SQLiteIngestStore(pool)).execute(path, reset=reset)
    finally:
        await pool.close()

    for name, count in asdict(summary).items():
        print(f"{name:<16} {count}")
    return 0


def cmd_seed(args: argparse.Namespace) -> None:
    try:
        code = asyncio.run(_seed(Path(args.file), args.reset))
    except InvoiceAnalyticsError as e:
        print(f"Error: {e.message}")
        code = 1
    sys.exit(code)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Invoice analytics management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply or inspect schema migrations")
    group = p_migrate.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show migration status")
    group.add_argument("--verify", action="store_true", help="Run integrity checks")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # seed
    p_seed = sub.add_parser("seed", help="Load invoice records from a JSON file")
    p_seed.add_argument("file", help="JSON array of extraction records")
    p_seed.add_argument("--reset", action="store_true", help="Delete existing data first")
    p_seed.set_defaults(func=cmd_seed)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
