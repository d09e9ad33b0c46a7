"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from tutoring.domain import (
    Contract,
    ContractId,
    ContractMode,
    Lesson,
    LessonId,
    Student,
    StudentId,
)
from tutoring.stores.interfaces import StudentStore

BASE_TIME = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


def at(day: int, hour: int = 9) -> datetime:
    """Timestamp ``day`` days after the base time."""
    return BASE_TIME + timedelta(days=day, hours=hour - 9)


def make_contract(
    mode: ContractMode = ContractMode.PACKAGE,
    total_lessons: int = 4,
    free_lessons: int | None = 0,
    created_at: datetime = BASE_TIME,
    **kwargs,
) -> Contract:
    return Contract(
        id=kwargs.pop("id", None) or ContractId.new(),
        mode=mode,
        created_at=created_at,
        total_lessons=total_lessons,
        free_lessons=free_lessons,
        **kwargs,
    )


def make_lesson(created_at: datetime, contract: Contract | None = None, **kwargs) -> Lesson:
    return Lesson(
        id=kwargs.pop("id", None) or LessonId.new(),
        created_at=created_at,
        billing_id=contract.id if contract else None,
        **kwargs,
    )


def make_student(lessons=(), contracts=(), **kwargs) -> Student:
    return Student(
        id=kwargs.pop("id", None) or StudentId.new(),
        first_name=kwargs.pop("first_name", "Ada"),
        last_name=kwargs.pop("last_name", "Lovelace"),
        created_at=kwargs.pop("created_at", BASE_TIME),
        lessons=tuple(lessons),
        billing_history=tuple(contracts),
        **kwargs,
    )


class InMemoryStudentStore(StudentStore):
    """Dict-backed store for service tests."""

    def __init__(self, students=()) -> None:
        self.students: dict[StudentId, Student] = {s.id: s for s in students}
        self.saves = 0

    def list_students(self) -> list[Student]:
        return list(self.students.values())

    def load_student(self, student_id: StudentId) -> Student | None:
        return self.students.get(student_id)

    def save_student(self, student: Student) -> None:
        self.saves += 1
        self.students[student.id] = student

    def delete_student(self, student_id: StudentId) -> bool:
        return self.students.pop(student_id, None) is not None

    def student_exists(self, student_id: StudentId) -> bool:
        return student_id in self.students


class Clock:
    """Manually advanced clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryStudentStore:
    return InMemoryStudentStore()
