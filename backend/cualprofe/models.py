from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class Modality(str, Enum):
    IN_PERSON = "Presencial"
    ONLINE = "Virtual"
    HYBRID = "Híbrida"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Professor(Base, TimestampMixin):
    __tablename__ = "professors"
    __table_args__ = (
        UniqueConstraint("name", "university", name="uq_professor_name_university"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    university: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    department: Mapped[str] = mapped_column(String(255), nullable=False)
    courses: Mapped[Optional[str]] = mapped_column(Text)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    ratings: Mapped[List["Rating"]] = relationship(
        back_populates="professor", cascade="all, delete-orphan"
    )

    @property
    def course_list(self) -> List[str]:
        if not self.courses:
            return []
        return [course.strip() for course in self.courses.split(",") if course.strip()]


class Rating(Base, TimestampMixin):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("professor_id", "user_id", name="uq_rating_professor_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    professor_id: Mapped[int] = mapped_column(
        ForeignKey("professors.id"), nullable=False, index=True
    )
    # Opaque identifier from the auth provider; anonymous ratings leave it empty.
    user_id: Mapped[Optional[str]] = mapped_column(String(128), index=True)

    quality: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty: Mapped[int] = mapped_column(Integer, nullable=False)
    would_take_again: Mapped[bool] = mapped_column(Boolean, nullable=False)
    subject_name: Mapped[str] = mapped_column(String(255), nullable=False)
    modality: Mapped[Modality] = mapped_column(
        SQLEnum(Modality), default=Modality.IN_PERSON, nullable=False
    )
    grade: Mapped[Optional[str]] = mapped_column(String(32))
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)

    professor: Mapped[Professor] = relationship(back_populates="ratings")


class Tag(Base, TimestampMixin):
    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("name", name="uq_tag_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
