from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .config import MAX_SCORE, MIN_SCORE
from .models import Modality


class ProfessorBase(BaseModel):
    name: str
    university: str
    department: str
    courses: Optional[str] = None


class ProfessorRead(ProfessorBase):
    id: int
    course_list: List[str] = []
    view_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AggregateStatsRead(BaseModel):
    """Rating summary as the front-end consumes it (camelCase keys)."""

    averageQuality: float = 0
    averageDifficulty: float = 0
    wouldTakeAgainPercent: int = 0
    distribution: List[int] = Field(default_factory=lambda: [0] * 5)
    topTags: List[str] = []


class ProfessorDetail(ProfessorRead):
    total_ratings: int = 0
    stats: AggregateStatsRead


class RatingBase(BaseModel):
    quality: int = Field(ge=MIN_SCORE, le=MAX_SCORE)
    difficulty: int = Field(ge=MIN_SCORE, le=MAX_SCORE)
    would_take_again: bool
    subject_name: str = Field(min_length=1, max_length=255)
    modality: Modality = Modality.IN_PERSON
    grade: Optional[str] = Field(default=None, max_length=32)
    comment: str
    tags: List[str] = []


class RatingCreate(RatingBase):
    user_id: Optional[str] = Field(default=None, max_length=128)


class RatingRead(RatingBase):
    id: int
    professor_id: int
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TagRead(BaseModel):
    id: int
    name: str
    usage_count: int = 0

    class Config:
        from_attributes = True


class DashboardTotals(BaseModel):
    total_professors: int
    total_ratings: int
    total_tags: int
    active_tags: int


class DailyCount(BaseModel):
    date: str
    count: int
    total: int


class UniversityStats(BaseModel):
    name: str
    professor_count: int
    total_ratings: int
    average_rating: float


class TagCount(BaseModel):
    name: str
    count: int


class TopProfessor(BaseModel):
    id: int
    name: str
    university: str
    view_count: int
    total_ratings: int
    average_rating: float
