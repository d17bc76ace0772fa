"""Bulk import of professors from CSV."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, Any, Union

import pandas as pd
from sqlalchemy.orm import Session

from ..models import Professor

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "university", "department")


@dataclass
class ImportReport:
    created: int = 0
    skipped: int = 0
    errors: int = 0


def _cell(row: pd.Series, column: str) -> str:
    value = row.get(column)
    if value is None or not pd.notna(value):
        return ""
    return str(value).strip()


def import_professors_csv(db: Session, source: Union[str, IO[Any]]) -> ImportReport:
    """Insert professors from ``source``, skipping rows already stored.

    A professor is a duplicate when the same (name, university) pair exists in
    the database or earlier in the same file.
    """

    df = pd.read_csv(source, dtype=str, skip_blank_lines=True)
    df.columns = [str(col).strip().lower() for col in df.columns]

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing required columns: {', '.join(missing)}")

    seen = {(name, university) for name, university in db.query(Professor.name, Professor.university)}
    report = ImportReport()

    for index, row in df.iterrows():
        name = _cell(row, "name")
        university = _cell(row, "university")
        department = _cell(row, "department")
        if not (name and university and department):
            logger.warning("Row %s is missing a required field, skipping", index)
            report.errors += 1
            continue

        if (name, university) in seen:
            report.skipped += 1
            continue

        courses = _cell(row, "courses") if "courses" in df.columns else ""
        db.add(
            Professor(
                name=name,
                university=university,
                department=department,
                courses=courses or None,
            )
        )
        seen.add((name, university))
        report.created += 1

    db.commit()
    logger.info(
        "Professor import finished: %d created, %d skipped, %d errors",
        report.created,
        report.skipped,
        report.errors,
    )
    return report
