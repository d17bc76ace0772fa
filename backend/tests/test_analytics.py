import math
from datetime import datetime, timedelta, timezone

from cualprofe.models import Professor, Rating, Tag
from cualprofe.services.analytics import (
    daily_counts,
    dashboard_totals,
    ratings_by_day,
    top_professors,
    top_tags,
    university_stats,
)


def _rating(quality, tags=None, **extra):
    return Rating(
        quality=quality,
        difficulty=3,
        would_take_again=True,
        subject_name="Cálculo I",
        comment="x" * 60,
        tags=tags or [],
        **extra,
    )


def _professor(name, university, qualities=(), view_count=0, id=None):
    return Professor(
        id=id,
        name=name,
        university=university,
        department="Ingeniería",
        view_count=view_count,
        ratings=[_rating(q) for q in qualities],
    )


def test_daily_counts_groups_by_day_with_running_total():
    timestamps = [
        datetime(2024, 1, 2, 10, 0),
        datetime(2024, 1, 1, 9, 0),
        datetime(2024, 1, 2, 23, 59),
        "2024-01-03",
        None,
    ]

    result = daily_counts(timestamps)

    assert [(d.date, d.count, d.total) for d in result] == [
        ("2024-01-01", 1, 1),
        ("2024-01-02", 2, 3),
    ]


def test_daily_counts_respects_since():
    timestamps = [datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 2, 10, 0)]

    result = daily_counts(timestamps, since=datetime(2024, 1, 2))

    assert [(d.date, d.count, d.total) for d in result] == [("2024-01-02", 1, 1)]


def test_daily_counts_buckets_aware_timestamps_in_utc():
    caracas = timezone(timedelta(hours=-4))

    result = daily_counts([datetime(2024, 1, 1, 23, 30, tzinfo=caracas)])

    assert result[0].date == "2024-01-02"


def test_university_stats_weights_by_rating_count():
    professors = [
        _professor("Ana", "UCAB", qualities=(5, 4)),
        _professor("Luis", "UCAB", qualities=(3,)),
        _professor("Pedro", "USB"),
        _professor("Sin Universidad", ""),
    ]

    stats = university_stats(professors)

    assert [s.name for s in stats] == ["UCAB", "USB"]
    ucab, usb = stats
    assert ucab.professor_count == 2
    assert ucab.total_ratings == 3
    assert math.isclose(ucab.average_rating, 4.0)
    assert usb.total_ratings == 0
    assert usb.average_rating == 0


def test_top_tags_site_wide():
    records = [
        {"tags": ["Exigente", "Claro"]},
        {"tags": ["Claro"]},
        {"tags": ["Divertido", "Exigente", "Claro"]},
    ]

    result = top_tags(records, limit=2)

    assert [(t.name, t.count) for t in result] == [("Claro", 3), ("Exigente", 2)]


def test_top_professors_by_views():
    professors = [
        _professor("Ana", "UCAB", qualities=(5, 4), view_count=3, id=1),
        _professor("Luis", "USB", view_count=10, id=2),
        _professor("Pedro", "UCV", qualities=(2,), view_count=7, id=3),
    ]

    result = top_professors(professors, limit=2)

    assert [p.name for p in result] == ["Luis", "Pedro"]
    assert result[0].total_ratings == 0
    assert math.isclose(result[1].average_rating, 2.0)


def test_dashboard_totals(db, professor):
    db.add_all([Tag(name="Exigente"), Tag(name="Aburrido", is_active=False)])
    db.add(_rating(5, professor_id=professor.id))
    db.commit()

    totals = dashboard_totals(db)

    assert totals.total_professors == 1
    assert totals.total_ratings == 1
    assert totals.total_tags == 2
    assert totals.active_tags == 1


def test_ratings_by_day_limits_window(db, professor):
    now = datetime.utcnow()
    for created_at in (now - timedelta(days=40), now - timedelta(days=1), now):
        db.add(_rating(4, professor_id=professor.id, created_at=created_at))
    db.commit()

    assert sum(day.count for day in ratings_by_day(db)) == 3
    recent = ratings_by_day(db, days=30)
    assert sum(day.count for day in recent) == 2
    assert recent[-1].total == 2
