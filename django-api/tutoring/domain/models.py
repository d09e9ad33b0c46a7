"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in tutoring/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime

from tutoring.domain.value_objects import (
    CefrProfile,
    ContractId,
    ContractMode,
    LessonId,
    Money,
    StudentId,
)


@dataclass(frozen=True)
class Lesson:
    """Domain representation of a tutoring Lesson.

    ``created_at`` is None only for legacy records that never carried a date.
    """

    id: LessonId
    created_at: datetime | None
    updated_at: datetime | None = None
    billing_id: ContractId | None = None
    is_free: bool = False
    comment: str = ""
    homework: str = ""
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Contract:
    """Domain representation of a billing Contract.

    ``consumed_lessons``, ``paid_consumed``, ``free_consumed``, ``completed``
    and ``completed_at`` are owned by the reconciliation engine.
    """

    id: ContractId
    mode: ContractMode
    created_at: datetime | None
    total_lessons: int = 1
    free_lessons: int | None = 0
    display_name: str = ""
    duration_minutes: int = 60
    custom_duration: bool = False
    price_per_lesson: Money | None = None
    currency: str | None = None
    paid: bool = False
    notes: str = ""
    start_date: date | None = None
    end_date: date | None = None
    updated_at: datetime | None = None
    consumed_lessons: int = 0
    paid_consumed: int = 0
    free_consumed: int = 0
    completed: bool = False
    completed_at: datetime | None = None


@dataclass(frozen=True)
class Student:
    """Student aggregate: the unit of persistence and of reconciliation."""

    id: StudentId
    first_name: str
    last_name: str
    created_at: datetime | None
    email: str = ""
    description: str = ""
    is_active: bool = True
    origin: str = ""
    goals: str = ""
    progress: int = 0
    cefr: CefrProfile = CefrProfile()
    photo: str | None = None
    tags: tuple[str, ...] = ()
    updated_at: datetime | None = None
    lessons: tuple[Lesson, ...] = ()
    billing_history: tuple[Contract, ...] = ()

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(frozen=True)
class StudentSummary:
    """A student paired with its count of still-open contracts."""

    student: Student
    billing_active_count: int
