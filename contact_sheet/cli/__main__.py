from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config, resolve_config_path
from ..errors import ContactSheetError
from ..logging.init import log_summary, setup_logging
from ..services.pipeline import ProcessingError, process_all, scan_source_files
from ..services.summary import render_summary_line
from ..spreadsheet.reader import parse_file

"""CLI entrypoint.

Flow:
- Load .env, resolve and load the analyze config
- Scan the source directory for csv / xlsx / xls / ods files
- Parse, analyze and export each file; print the SUMMARY line

Exit codes: 0 all files succeeded (or none found), 2 at least one file
failed, 1 fatal (bad config, missing source directory).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path) -> None:
    """Load .env via python-dotenv (existing environment variables win)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="contact-sheet",
        description="Spreadsheet contact analysis & export (csv / json / xlsx / vcf)",
    )
    p.add_argument("--config", help="Path to analyze config (default: config/analyze.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data", action="store_true", help="Print headers & first rows of each file then exit"
    )
    return p.parse_args(argv)


def _inspect_data(directory: Path) -> int:
    files = scan_source_files(directory)
    if not files:
        print("inspect: no supported files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            dataset = parse_file(f)
        except ContactSheetError as e:
            print(f"  parse_error: {e}")
            continue
        print(f"  headers={dataset.headers} rows={dataset.total_rows}")
        for row in dataset.rows[:INSPECT_SAMPLE_ROWS]:
            print(f"    {json.dumps(row, ensure_ascii=False)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.is_dir():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Processing files from: {directory}")
    logger.debug(f"mapping={cfg.column_mapping.to_dict()} exports={list(cfg.exports)}")

    if args.inspect_data:
        return _inspect_data(directory)

    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary が "SUMMARY " を付与するため除去
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
