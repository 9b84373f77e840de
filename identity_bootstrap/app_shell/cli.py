import argparse
import asyncio
import json
import logging
import sqlite3
import sys
from pathlib import Path

from identity_bootstrap.app_shell.config import (
    Settings,
    configure_logging,
    ensure_data_dir,
    validate_bootstrap_rules,
)
from identity_bootstrap.app_shell.context import ServiceContext
from identity_bootstrap.rules.loader import load_rules

logger = logging.getLogger("cli")


def get_context(args: argparse.Namespace) -> ServiceContext:
    settings = Settings()
    if args.rules:
        settings.rules_path = Path(args.rules)
    if args.db:
        settings.db_path = args.db

    try:
        rules = load_rules(settings.rules_path)
        validate_bootstrap_rules(rules)
    except FileNotFoundError:
        logger.error(f"Rules file {settings.rules_path} not found.")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid rules: {e}")
        sys.exit(1)

    return ServiceContext.create(settings, rules)


def handle_init(ctx: ServiceContext, args: argparse.Namespace) -> None:
    ensure_data_dir(ctx.settings)
    try:
        asyncio.run(ctx.bootstrap())
    except (sqlite3.Error, RuntimeError) as e:
        logger.error(f"Identity database initialization failed: {e}")
        sys.exit(1)

    status = asyncio.run(ctx.status())
    if status.provisioned:
        print("Identity store provisioned.")
    else:
        print("Identity store initialized with warnings; see log output.")


def handle_status(ctx: ServiceContext, args: argparse.Namespace) -> None:
    if not Path(ctx.settings.db_path).exists():
        print(f"Database {ctx.settings.db_path} does not exist.")
        return

    status = asyncio.run(ctx.status())
    if args.json:
        print(json.dumps(status.as_dict(), indent=2))
        return

    print(f"Schema current:     {status.schema_current}")
    if status.pending_migrations:
        print(f"Pending migrations: {', '.join(status.pending_migrations)}")
    print(f"Admin role exists:  {status.admin_role_exists}")
    print(f"Admin user exists:  {status.admin_user_exists}")
    if status.admin_user_exists:
        print(f"Admin user roles:   {', '.join(status.admin_user_roles) or '(none)'}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Identity store bootstrap")
    parser.add_argument("--rules", help="Path to rules.yaml (default: $IDB_RULES_PATH)")
    parser.add_argument("--db", help="Path to the SQLite database (default: $IDB_DB_PATH)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init
    subparsers.add_parser("init", help="Ensure schema, admin role and admin account")

    # status
    status_parser = subparsers.add_parser("status", help="Show provisioning status")
    status_parser.add_argument("--json", action="store_true", help="Print JSON")

    args = parser.parse_args(argv)

    configure_logging(Settings().log_level)
    ctx = get_context(args)

    if args.command == "init":
        handle_init(ctx, args)
    elif args.command == "status":
        handle_status(ctx, args)


if __name__ == "__main__":
    main()
