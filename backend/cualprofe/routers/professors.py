from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from ..database import get_db
from ..models import Professor, Rating
from ..schemas import (
    AggregateStatsRead,
    ProfessorDetail,
    ProfessorRead,
    RatingCreate,
    RatingRead,
)
from ..services.aggregation import aggregate
from ..services.ratings import (
    ProfessorNotFoundError,
    RatingValidationError,
    get_professor,
    list_ratings,
    professor_stats,
    submit_rating,
)
from ..services.search import filter_professors, get_suggestions

router = APIRouter(prefix="/professors", tags=["professors"])


def _load_professor(db: Session, professor_id: int) -> Professor:
    try:
        return get_professor(db, professor_id)
    except ProfessorNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Professor not found") from exc


@router.get("", response_model=List[ProfessorRead])
def search_professors(
    q: Optional[str] = Query(None, max_length=100),
    university: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> List[Professor]:
    query = db.query(Professor)
    if university:
        query = query.filter(Professor.university == university)
    professors = query.order_by(Professor.name.asc()).all()
    return filter_professors(professors, q)


@router.get("/suggestions", response_model=List[str])
def professor_suggestions(
    q: str = Query(..., min_length=1, max_length=100),
    db: Session = Depends(get_db),
) -> List[str]:
    options: List[str] = []
    for name, university in db.query(Professor.name, Professor.university):
        options.append(name)
        options.append(university)
    # Universities repeat across professors
    return get_suggestions(q, dict.fromkeys(options))


@router.get("/{professor_id}", response_model=ProfessorDetail)
def read_professor(professor_id: int, db: Session = Depends(get_db)) -> ProfessorDetail:
    bumped = (
        db.query(Professor)
        .filter(Professor.id == professor_id)
        .update({Professor.view_count: Professor.view_count + 1}, synchronize_session=False)
    )
    if not bumped:
        raise HTTPException(status_code=404, detail="Professor not found")
    db.commit()

    professor = (
        db.query(Professor)
        .options(selectinload(Professor.ratings))
        .filter(Professor.id == professor_id)
        .one()
    )

    stats = aggregate(professor.ratings)
    return ProfessorDetail(
        id=professor.id,
        name=professor.name,
        university=professor.university,
        department=professor.department,
        courses=professor.courses,
        course_list=professor.course_list,
        view_count=professor.view_count,
        created_at=professor.created_at,
        total_ratings=len(professor.ratings),
        stats=AggregateStatsRead(**stats.to_dict()),
    )


@router.get("/{professor_id}/ratings", response_model=List[RatingRead])
def read_professor_ratings(professor_id: int, db: Session = Depends(get_db)) -> List[Rating]:
    try:
        return list_ratings(db, professor_id)
    except ProfessorNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Professor not found") from exc


@router.get("/{professor_id}/stats", response_model=AggregateStatsRead)
def read_professor_stats(professor_id: int, db: Session = Depends(get_db)) -> dict:
    try:
        return professor_stats(db, professor_id).to_dict()
    except ProfessorNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Professor not found") from exc


@router.post(
    "/{professor_id}/ratings",
    response_model=RatingRead,
    status_code=status.HTTP_201_CREATED,
)
def create_rating(
    professor_id: int,
    rating_in: RatingCreate,
    db: Session = Depends(get_db),
) -> Rating:
    _load_professor(db, professor_id)
    try:
        return submit_rating(db, professor_id, rating_in)
    except RatingValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
