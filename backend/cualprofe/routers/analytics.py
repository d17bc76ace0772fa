from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import ANALYTICS_TOP_PROFESSORS, ANALYTICS_TOP_TAGS
from ..database import get_db
from ..models import Rating
from ..schemas import DailyCount, DashboardTotals, TagCount, TopProfessor, UniversityStats
from ..services.analytics import (
    dashboard_totals,
    load_professors_with_ratings,
    ratings_by_day,
    top_professors,
    top_tags,
    university_stats,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=DashboardTotals)
def summary(db: Session = Depends(get_db)) -> DashboardTotals:
    return dashboard_totals(db)


@router.get("/ratings-by-day", response_model=List[DailyCount])
def daily_ratings(
    days: Optional[int] = Query(None, ge=1, le=3650),
    db: Session = Depends(get_db),
) -> List[DailyCount]:
    return ratings_by_day(db, days=days)


@router.get("/universities", response_model=List[UniversityStats])
def universities(db: Session = Depends(get_db)) -> List[UniversityStats]:
    return university_stats(load_professors_with_ratings(db))


@router.get("/top-tags", response_model=List[TagCount])
def site_top_tags(
    limit: int = Query(ANALYTICS_TOP_TAGS, ge=1, le=50),
    db: Session = Depends(get_db),
) -> List[TagCount]:
    return top_tags(db.query(Rating).order_by(Rating.created_at.asc(), Rating.id.asc()), limit=limit)


@router.get("/top-professors", response_model=List[TopProfessor])
def most_viewed_professors(
    limit: int = Query(ANALYTICS_TOP_PROFESSORS, ge=1, le=50),
    db: Session = Depends(get_db),
) -> List[TopProfessor]:
    return top_professors(load_professors_with_ratings(db), limit=limit)
