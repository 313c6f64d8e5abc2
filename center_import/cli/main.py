from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
import psycopg2.extras
from dotenv import load_dotenv

from center_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from center_import.db.repository import PgCenterRepository, RepositoryError
from center_import.excel.template import build_template_workbook
from center_import.logging.error_log import ErrorLogBuffer
from center_import.logging.init import log_summary, set_debug, setup_logging
from center_import.models.config_models import DatabaseConfig, ImportConfig
from center_import.services.orchestrator import ProcessingError, import_workbook, locate_sheets
from center_import.services.summary import render_summary_line

"""CLI entrypoint.

    python -m center_import.cli --center-id 7 workbook.xlsx
    python -m center_import.cli --inspect-data workbook.xlsx
    python -m center_import.cli --write-template template.xlsx

Exit codes: 0 committed, 2 rolled back because of row errors, 1 fatal
(configuration, unreadable workbook, unknown center, database failure).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_ROW_ERRORS = 2


def _resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Connection string, by precedence:

    1. DATABASE_URL / PGDSN (environment, .env already loaded with override)
    2. individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
    3. the database section of the config file
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_cursor(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper over psycopg2)
    """Yield a RealDictCursor on an autocommit connection.

    Autocommit is on because the repository sends BEGIN / COMMIT / ROLLBACK
    itself; the orchestrator owns the transaction boundary.
    """
    conn = psycopg2.connect(_resolve_dsn(cfg.database))
    try:
        conn.autocommit = True
        with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            yield cur
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Center workbook (groups/students/payments) importer")
    p.add_argument("workbook", nargs="?", type=Path, help="Path to the .xlsx/.xls workbook")
    p.add_argument("--center-id", type=int, help="Target center id")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print located sheets, headers & first rows then exit")
    p.add_argument("--error-log", action="store_true", help="Write row errors to logs/errors-*.log as JSON Lines")
    p.add_argument("--write-template", type=Path, metavar="PATH", help="Write a blank import template and exit")
    return p.parse_args(argv)


def _inspect_data(workbook: bytes, cfg: ImportConfig) -> int:
    try:
        sheets = locate_sheets(workbook, cfg)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    for logical, sheet in sheets.items():
        if sheet.name is None:
            print(f"SHEET {logical}: not found")
            continue
        headers = list(sheet.rows[0].values.keys()) if sheet.rows else []
        print(f"SHEET {logical}: '{sheet.name}' rows={len(sheet.rows)} cols={headers}")
        for row in sheet.rows[:3]:
            # datetime values are not JSON serializable; fall back to str()
            print(f"  row {row.row_number}: {json.dumps(row.values, ensure_ascii=False, default=str)}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an empty list from tests must not pull in pytest's argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.write_template is not None:
        args.write_template.write_bytes(build_template_workbook())
        logger.info(f"template written: {args.write_template}")
        return EXIT_SUCCESS

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config, required=args.config is not None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.workbook is None:
        logger.error("workbook path is required")
        return EXIT_FATAL
    if not args.workbook.is_file():
        logger.error(f"workbook not found: {args.workbook}")
        return EXIT_FATAL
    data = args.workbook.read_bytes()

    if args.inspect_data:
        return _inspect_data(data, cfg)

    if args.center_id is None:
        logger.error("--center-id is required")
        return EXIT_FATAL

    logger.info(f"importing {args.workbook.name} into center {args.center_id}")
    try:
        with _db_cursor(cfg) as cur:
            result = import_workbook(args.center_id, data, PgCenterRepository(cur), config=cfg)
    except ProcessingError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL
    except (RepositoryError, psycopg2.Error) as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL

    for err in result.errors:
        logger.error(f"{err.sheet} row {err.row}: {err.message}")
    if result.errors and args.error_log:
        buffer = ErrorLogBuffer()
        buffer.extend(result.errors)
        path = buffer.flush()
        logger.info(f"row errors written to {path}")

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))
    return EXIT_SUCCESS if result.committed else EXIT_ROW_ERRORS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
