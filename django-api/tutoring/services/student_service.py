"""Student service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every mutation loads the whole student aggregate, applies the change, runs
billing reconciliation over it and saves it back.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeVar

from django.utils import timezone

from tutoring.domain import (
    CefrLevel,
    CefrProfile,
    Contract,
    ContractId,
    ContractMode,
    Lesson,
    LessonId,
    Money,
    Student,
    StudentId,
    StudentSummary,
)
from tutoring.domain.billing import (
    active_contract_count,
    chronological_key,
    generate_display_name,
    latest_open_contract,
    reconcile,
)
from tutoring.domain.errors import (
    ContractNotFoundError,
    InvalidIdError,
    LessonNotFoundError,
    StudentNotFoundError,
)
from tutoring.stores.interfaces import StudentStore

logger = logging.getLogger(__name__)

STUDENT_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "description",
        "is_active",
        "origin",
        "goals",
        "progress",
        "cefr",
        "photo",
        "tags",
    }
)
LESSON_FIELDS = frozenset({"created_at", "comment", "homework", "tags", "billing_id"})
CONTRACT_FIELDS = frozenset(
    {
        "mode",
        "total_lessons",
        "free_lessons",
        "display_name",
        "duration_minutes",
        "custom_duration",
        "price_per_lesson",
        "currency",
        "paid",
        "notes",
        "start_date",
        "end_date",
    }
)

DEFAULT_ORIGIN = "Privé"

IdT = TypeVar("IdT", StudentId, LessonId, ContractId)


def _parse_id(cls: type[IdT], value: Any, kind: str) -> IdT:
    if isinstance(value, cls):
        return value
    try:
        return cls.from_string(str(value))
    except ValueError:
        raise InvalidIdError(kind) from None


def _newest_first(student: Student) -> Student:
    lessons = sorted(student.lessons, key=chronological_key, reverse=True)
    return replace(student, lessons=tuple(lessons))


def _student_values(data: Mapping[str, Any]) -> dict[str, Any]:
    values = {key: data[key] for key in STUDENT_FIELDS if key in data}
    if "tags" in values:
        values["tags"] = tuple(values["tags"])
    cefr = values.get("cefr")
    if cefr is None and "cefr" in values:
        values["cefr"] = CefrProfile()
    elif cefr is not None and not isinstance(cefr, CefrProfile):
        values["cefr"] = CefrProfile(
            **{skill: CefrLevel(level) for skill, level in cefr.items() if level}
        )
    if "photo" in values:
        values["photo"] = values["photo"] or None
    return values


def _contract_values(data: Mapping[str, Any]) -> dict[str, Any]:
    values = {key: data[key] for key in CONTRACT_FIELDS if key in data}
    if "mode" in values and not isinstance(values["mode"], ContractMode):
        values["mode"] = ContractMode(values["mode"])
    price = values.get("price_per_lesson")
    if price is not None and not isinstance(price, Money):
        values["price_per_lesson"] = Money(Decimal(str(price)))
    if values.get("mode") is ContractMode.SINGLE:
        values["free_lessons"] = 0
    return values


class StudentService:
    """Service for student, lesson and billing contract operations."""

    def __init__(
        self,
        store: StudentStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._clock = clock

    # Students

    def list_students(self) -> list[StudentSummary]:
        """Return all students ordered by last name then first name, ignoring case."""
        students = sorted(
            self._store.list_students(),
            key=lambda s: (s.last_name.casefold(), s.first_name.casefold()),
        )
        return [
            StudentSummary(student=s, billing_active_count=active_contract_count(s))
            for s in students
        ]

    def get_student(self, student_id: str) -> Student:
        """Return a student with billing state recomputed and lessons newest first.

        Raises:
            InvalidIdError: If the student_id is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
        """
        student = self._load(student_id)
        return _newest_first(reconcile(student, now=self._clock()))

    def create_student(self, data: Mapping[str, Any]) -> Student:
        """Create a student with no lessons and no contracts.

        A student is inactive unless ``is_active`` is given, and an empty
        ``origin`` falls back to DEFAULT_ORIGIN.
        """
        values = _student_values(data)
        values.setdefault("is_active", False)
        if not values.get("origin"):
            values["origin"] = DEFAULT_ORIGIN
        student = Student(
            id=StudentId.new(),
            first_name=values.pop("first_name", ""),
            last_name=values.pop("last_name", ""),
            created_at=self._clock(),
            **values,
        )
        self._store.save_student(student)
        logger.info("Created student %s", student.id)
        return student

    def update_student(self, student_id: str, patch: Mapping[str, Any]) -> Student:
        """Apply a patch to a student.

        ``lessons`` and ``billing_history`` in the patch replace the
        aggregate's collections wholesale and trigger reconciliation.

        Raises:
            InvalidIdError: If the student_id is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
        """
        student = self._load(student_id)
        values = _student_values(patch)
        now = self._clock()
        student = replace(student, updated_at=now, **values)

        if "lessons" in patch or "billing_history" in patch:
            lessons: Sequence[Lesson] = patch.get("lessons", student.lessons)
            history: Sequence[Contract] = patch.get("billing_history", student.billing_history)
            student = reconcile(
                replace(student, lessons=tuple(lessons), billing_history=tuple(history)),
                now=now,
            )

        self._store.save_student(student)
        logger.info("Updated student %s", student.id)
        return student

    def delete_student(self, student_id: str) -> None:
        """Hard-delete a student with all of its lessons and contracts.

        Raises:
            InvalidIdError: If the student_id is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
        """
        sid = _parse_id(StudentId, student_id, "student ID")
        if not self._store.delete_student(sid):
            raise StudentNotFoundError(str(student_id))
        logger.info("Deleted student %s", sid)

    # Lessons

    def add_lesson(self, student_id: str, data: Mapping[str, Any]) -> Student:
        """Add a lesson and return the student with lessons newest first.

        Without an explicit ``billing_id`` the lesson is attached to the most
        recently created open contract, if any.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
            ContractNotFoundError: If ``billing_id`` names an unknown contract.
        """
        student = self._load(student_id)
        now = self._clock()

        billing_id = data.get("billing_id")
        if billing_id:
            billing_id = self._find_contract(student, billing_id).id
        else:
            contract = latest_open_contract(student)
            billing_id = contract.id if contract else None

        lesson = Lesson(
            id=LessonId.new(),
            created_at=data.get("created_at") or now,
            billing_id=billing_id,
            comment=data.get("comment", ""),
            homework=data.get("homework", ""),
            tags=tuple(data.get("tags", ())),
        )
        student = reconcile(replace(student, lessons=student.lessons + (lesson,)), now=now)
        self._store.save_student(student)
        logger.info("Added lesson %s to student %s (contract %s)", lesson.id, student.id, billing_id)
        return _newest_first(student)

    def update_lesson(
        self, student_id: str, lesson_id: str, patch: Mapping[str, Any]
    ) -> Lesson:
        """Apply a patch to a lesson and return the reconciled lesson.

        A ``billing_id`` of None detaches the lesson from its contract.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
            LessonNotFoundError: If the lesson does not exist.
            ContractNotFoundError: If ``billing_id`` names an unknown contract.
        """
        student = self._load(student_id)
        lesson = self._find_lesson(student, lesson_id)
        now = self._clock()

        values = {key: patch[key] for key in LESSON_FIELDS if key in patch}
        if "tags" in values:
            values["tags"] = tuple(values["tags"])
        if "billing_id" in values and values["billing_id"] is not None:
            values["billing_id"] = self._find_contract(student, values["billing_id"]).id
        if values.get("created_at") is None:
            values.pop("created_at", None)
        updated = replace(lesson, updated_at=now, **values)

        lessons = tuple(updated if item.id == lesson.id else item for item in student.lessons)
        student = reconcile(replace(student, lessons=lessons), now=now)
        self._store.save_student(student)
        logger.info("Updated lesson %s of student %s", lesson.id, student.id)
        return next(item for item in student.lessons if item.id == lesson.id)

    def delete_lesson(self, student_id: str, lesson_id: str) -> None:
        """Hard-delete a lesson and recompute billing.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
            LessonNotFoundError: If the lesson does not exist.
        """
        student = self._load(student_id)
        lesson = self._find_lesson(student, lesson_id)
        lessons = tuple(item for item in student.lessons if item.id != lesson.id)
        student = reconcile(replace(student, lessons=lessons), now=self._clock())
        self._store.save_student(student)
        logger.info("Deleted lesson %s of student %s", lesson.id, student.id)

    # Contracts

    def add_contract(self, student_id: str, data: Mapping[str, Any]) -> Contract:
        """Create a billing contract on a student.

        Raises:
            InvalidIdError: If the student_id is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
        """
        student = self._load(student_id)
        now = self._clock()
        values = _contract_values(data)
        values.setdefault("mode", ContractMode.SINGLE)
        if not values.get("display_name"):
            values["display_name"] = generate_display_name(
                values["mode"], values.get("total_lessons", 1), student.billing_history
            )
        contract = Contract(id=ContractId.new(), created_at=now, **values)

        student = reconcile(
            replace(student, billing_history=student.billing_history + (contract,)),
            now=now,
        )
        self._store.save_student(student)
        logger.info("Added %s contract %s to student %s", contract.mode.value, contract.id, student.id)
        return self._find_contract(student, contract.id)

    def update_contract(
        self, student_id: str, contract_id: str, patch: Mapping[str, Any]
    ) -> Contract:
        """Apply a patch to a contract and return it reconciled.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
            ContractNotFoundError: If the contract does not exist.
        """
        student = self._load(student_id)
        contract = self._find_contract(student, contract_id)
        updated = replace(contract, **_contract_values(patch))

        history = tuple(
            updated if item.id == contract.id else item for item in student.billing_history
        )
        student = reconcile(replace(student, billing_history=history), now=self._clock())
        self._store.save_student(student)
        logger.info("Updated contract %s of student %s", contract.id, student.id)
        return self._find_contract(student, contract.id)

    def delete_contract(self, student_id: str, contract_id: str) -> None:
        """Hard-delete a contract. Its lessons stay, pointing at the removed id.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            StudentNotFoundError: If the student does not exist.
            ContractNotFoundError: If the contract does not exist.
        """
        student = self._load(student_id)
        contract = self._find_contract(student, contract_id)
        history = tuple(item for item in student.billing_history if item.id != contract.id)
        student = reconcile(replace(student, billing_history=history), now=self._clock())
        self._store.save_student(student)
        logger.info("Deleted contract %s of student %s", contract.id, student.id)

    # Helpers

    def _load(self, student_id: str) -> Student:
        sid = _parse_id(StudentId, student_id, "student ID")
        student = self._store.load_student(sid)
        if student is None:
            raise StudentNotFoundError(str(student_id))
        return student

    def _find_lesson(self, student: Student, lesson_id: Any) -> Lesson:
        lid = _parse_id(LessonId, lesson_id, "lesson ID")
        for lesson in student.lessons:
            if lesson.id == lid:
                return lesson
        raise LessonNotFoundError(str(lesson_id))

    def _find_contract(self, student: Student, contract_id: Any) -> Contract:
        cid = _parse_id(ContractId, contract_id, "contract ID")
        for contract in student.billing_history:
            if contract.id == cid:
                return contract
        raise ContractNotFoundError(str(contract_id))
