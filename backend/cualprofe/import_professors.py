"""Load professors from a CSV file into the configured database.

Usage:
    python -m cualprofe.import_professors professors.csv
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .database import Base, engine, session_scope
from .log import setup_logging
from .services.importer import import_professors_csv

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Import professors from CSV, skipping (name, university) duplicates"
    )
    parser.add_argument("csv_path", type=Path, help="CSV with name, university, department[, courses]")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.csv_path.is_file():
        logger.error("CSV file does not exist: %s", args.csv_path)
        return 1

    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        report = import_professors_csv(db, str(args.csv_path))

    print(f"created={report.created} skipped={report.skipped} errors={report.errors}")
    return 0 if report.errors == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
