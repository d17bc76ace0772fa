"""Rating submission and per-professor summaries."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from ..config import MAX_COMMENT_LENGTH, MAX_TAGS_PER_RATING, MIN_COMMENT_LENGTH
from ..models import Professor, Rating, Tag
from ..schemas import RatingCreate
from .aggregation import AggregateStats, aggregate

logger = logging.getLogger(__name__)


class ProfessorNotFoundError(LookupError):
    """Raised when a rating or summary refers to an unknown professor."""


class RatingValidationError(ValueError):
    """Raised when a submitted rating breaks a submission rule."""


def get_professor(db: Session, professor_id: int) -> Professor:
    professor = db.query(Professor).filter(Professor.id == professor_id).first()
    if professor is None:
        raise ProfessorNotFoundError(f"Professor {professor_id} not found")
    return professor


def _active_tag_names(db: Session) -> set[str]:
    return {name for (name,) in db.query(Tag.name).filter(Tag.is_active == True)}


def clean_rating(rating_in: RatingCreate, allowed_tags: set[str]) -> dict:
    """Apply submission rules and return the values to store.

    ``allowed_tags`` empty means no vocabulary has been configured yet, in
    which case any tag is accepted.
    """

    subject_name = rating_in.subject_name.strip()
    if not subject_name:
        raise RatingValidationError("Subject name is required")

    comment = rating_in.comment.strip()
    if len(comment) < MIN_COMMENT_LENGTH:
        raise RatingValidationError(
            f"Comment must be at least {MIN_COMMENT_LENGTH} characters"
        )
    if len(comment) > MAX_COMMENT_LENGTH:
        raise RatingValidationError(
            f"Comment must be at most {MAX_COMMENT_LENGTH} characters"
        )

    tags = list(rating_in.tags)
    if len(tags) > MAX_TAGS_PER_RATING:
        raise RatingValidationError(f"At most {MAX_TAGS_PER_RATING} tags per rating")
    if len(set(tags)) != len(tags):
        raise RatingValidationError("Tags must not repeat")
    if allowed_tags:
        unknown = [tag for tag in tags if tag not in allowed_tags]
        if unknown:
            raise RatingValidationError(f"Unknown tags: {', '.join(unknown)}")

    grade = rating_in.grade.strip() if rating_in.grade else ""

    return {
        "quality": rating_in.quality,
        "difficulty": rating_in.difficulty,
        "would_take_again": rating_in.would_take_again,
        "subject_name": subject_name,
        "modality": rating_in.modality,
        "grade": grade or None,
        "comment": comment,
        "tags": tags,
    }


def _bump_tag_usage(db: Session, added: List[str]) -> None:
    if not added:
        return
    for tag in db.query(Tag).filter(Tag.name.in_(added)).all():
        tag.usage_count += 1


def submit_rating(db: Session, professor_id: int, rating_in: RatingCreate) -> Rating:
    """Store a rating; a user's second rating of a professor replaces the first."""

    professor = get_professor(db, professor_id)
    values = clean_rating(rating_in, _active_tag_names(db))

    existing = None
    if rating_in.user_id:
        existing = (
            db.query(Rating)
            .filter(Rating.professor_id == professor.id, Rating.user_id == rating_in.user_id)
            .first()
        )

    if existing:
        added = [tag for tag in values["tags"] if tag not in (existing.tags or [])]
        for key, value in values.items():
            setattr(existing, key, value)
        rating = existing
        logger.info("Updated rating %s for professor %s", rating.id, professor.id)
    else:
        added = values["tags"]
        rating = Rating(professor_id=professor.id, user_id=rating_in.user_id, **values)
        db.add(rating)

    _bump_tag_usage(db, added)
    db.commit()
    db.refresh(rating)
    if not existing:
        logger.info("Created rating %s for professor %s", rating.id, professor.id)
    return rating


def list_ratings(db: Session, professor_id: int) -> List[Rating]:
    get_professor(db, professor_id)
    return (
        db.query(Rating)
        .filter(Rating.professor_id == professor_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
        .all()
    )


def professor_stats(db: Session, professor_id: int) -> AggregateStats:
    return aggregate(list_ratings(db, professor_id))
