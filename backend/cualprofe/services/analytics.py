"""Site-wide statistics for the admin analytics view."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from ..config import ANALYTICS_TOP_PROFESSORS, ANALYTICS_TOP_TAGS
from ..models import Professor, Rating, Tag
from ..schemas import DailyCount, DashboardTotals, TagCount, TopProfessor, UniversityStats
from .aggregation import aggregate, count_tags, rank_tags, round_half_up

logger = logging.getLogger(__name__)


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def daily_counts(
    timestamps: Iterable[Any], since: Optional[datetime] = None
) -> List[DailyCount]:
    """Group timestamps by calendar day with a running total, oldest first."""

    threshold = _naive_utc(since) if since else None
    per_day: dict[str, int] = {}
    for moment in timestamps:
        if not isinstance(moment, datetime):
            continue
        moment = _naive_utc(moment)
        if threshold and moment < threshold:
            continue
        key = moment.date().isoformat()
        per_day[key] = per_day.get(key, 0) + 1

    running = 0
    result: List[DailyCount] = []
    for key in sorted(per_day):
        running += per_day[key]
        result.append(DailyCount(date=key, count=per_day[key], total=running))
    return result


def university_stats(professors: Iterable[Professor]) -> List[UniversityStats]:
    """Per-university professor and rating totals.

    The university average weights each professor's average by how many
    ratings it was computed from.
    """

    grouped: dict[str, dict] = {}
    for professor in professors:
        university = professor.university
        if not university:
            continue
        entry = grouped.setdefault(
            university, {"professor_count": 0, "total_ratings": 0, "ratings_sum": 0.0}
        )
        ratings = list(professor.ratings or [])
        stats = aggregate(ratings)
        entry["professor_count"] += 1
        entry["total_ratings"] += len(ratings)
        entry["ratings_sum"] += stats.average_quality * len(ratings)

    result = [
        UniversityStats(
            name=name,
            professor_count=entry["professor_count"],
            total_ratings=entry["total_ratings"],
            average_rating=(
                round_half_up(entry["ratings_sum"] / entry["total_ratings"], 2)
                if entry["total_ratings"]
                else 0
            ),
        )
        for name, entry in grouped.items()
    ]
    result.sort(key=lambda item: item.professor_count, reverse=True)
    return result


def top_tags(records: Iterable[Any], limit: int = ANALYTICS_TOP_TAGS) -> List[TagCount]:
    counts = count_tags(records)
    return [TagCount(name=tag, count=counts[tag]) for tag in rank_tags(counts, limit)]


def top_professors(
    professors: Iterable[Professor], limit: int = ANALYTICS_TOP_PROFESSORS
) -> List[TopProfessor]:
    ranked = sorted(professors, key=lambda professor: professor.view_count or 0, reverse=True)
    result = []
    for professor in ranked[:limit]:
        ratings = list(professor.ratings or [])
        result.append(
            TopProfessor(
                id=professor.id,
                name=professor.name,
                university=professor.university,
                view_count=professor.view_count or 0,
                total_ratings=len(ratings),
                average_rating=aggregate(ratings).average_quality,
            )
        )
    return result


def dashboard_totals(db: Session) -> DashboardTotals:
    return DashboardTotals(
        total_professors=db.query(Professor).count(),
        total_ratings=db.query(Rating).count(),
        total_tags=db.query(Tag).count(),
        active_tags=db.query(Tag).filter(Tag.is_active == True).count(),
    )


def ratings_by_day(db: Session, days: Optional[int] = None) -> List[DailyCount]:
    since = None
    query = db.query(Rating.created_at)
    if days:
        since = datetime.utcnow() - timedelta(days=days)
        query = query.filter(Rating.created_at >= since)
    counts = daily_counts((created_at for (created_at,) in query), since=since)
    logger.debug("Computed %d daily rating buckets", len(counts))
    return counts


def load_professors_with_ratings(db: Session) -> List[Professor]:
    return db.query(Professor).options(selectinload(Professor.ratings)).all()
