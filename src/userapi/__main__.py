"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m userapi                         # 127.0.0.1:8080, ./users.db
    python -m userapi --port 3000 --db /tmp/users.db
    python -m userapi --no-validate           # store names/ages unchecked
    userapi --log-format json                 # console script, same flags

Flags override environment variables, which override defaults (see
ServerConfig.from_env()).

Exit status is 1 when startup fails: bad settings, a database that cannot
be opened, or a port that cannot be bound.

=============================================================================
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence

from . import __version__
from .app import create_app
from .config import ServerConfig
from .errors import StorageError


logger = logging.getLogger("userapi")


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="userapi",
        description="Users CRUD API on a from-scratch HTTP/1.1 server backed by SQLite",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m userapi                          # Run with defaults
  python -m userapi --port 3000              # Custom port
  python -m userapi --host 0.0.0.0           # Listen on all interfaces
  python -m userapi --db /var/lib/users.db   # Database location
  python -m userapi --no-validate            # Skip name/age checks
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────
    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.min_workers,
        help=f"Worker threads at startup; up to twice as many under load (default: {defaults.min_workers})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # STORAGE
    # ─────────────────────────────────────────────────────────────────────
    parser.add_argument(
        "--db", "-d",
        default=defaults.db_path,
        help=f"SQLite database file (default: {defaults.db_path})",
    )
    parser.add_argument(
        "--no-validate",
        dest="validate",
        action="store_false",
        default=defaults.validate_users,
        help="Do not check name length and age range on create/update",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────
    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=defaults.log_format,
        help="Access log format (default: %(default)s)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"userapi {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace, base: ServerConfig) -> ServerConfig:
    """Overlay the parsed flags on ``base``; fields without a flag keep its values."""
    return replace(
        base,
        host=args.host,
        port=args.port,
        min_workers=args.workers,
        max_workers=max(args.workers * 2, base.max_workers),
        db_path=args.db,
        validate_users=args.validate,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        env_config = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment setting: {e}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(env_config).parse_args(argv)
    config = config_from_args(args, env_config)

    print("Hello World")

    try:
        server = create_app(config)
    except (StorageError, ValueError) as e:
        logging.basicConfig(level=logging.ERROR, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    try:
        server.run()
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
