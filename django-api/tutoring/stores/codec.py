"""Translation between student aggregates and the JSON document shape.

The document uses camelCase keys (``billingHistory``, ``billingId``,
``isFree``...) and ISO-8601 timestamps. Reading is lenient: missing arrays
become empty, missing counters become 0, and an unknown contract mode is read
as a single-lesson contract. A malformed timestamp or CEFR level is logged
and read as absent rather than failing the whole collection.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from django.utils.dateparse import parse_date, parse_datetime

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
)

logger = logging.getLogger(__name__)

Document = dict[str, Any]


def format_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def read_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        parsed = parse_datetime(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        logger.warning("Ignoring malformed timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _read_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        parsed = parse_date(str(value)[:10])
    except ValueError:
        parsed = None
    if parsed is None:
        logger.warning("Ignoring malformed date %r", value)
    return parsed


def _read_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def _read_money(value: Any) -> Money | None:
    if value is None or value == "":
        return None
    try:
        return Money(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return None


def _read_cefr(value: Any) -> CefrProfile:
    if not isinstance(value, dict):
        return CefrProfile()
    levels = {}
    for key, level in value.items():
        if key not in CefrProfile.KEYS.values() or not level:
            continue
        try:
            levels[key] = CefrLevel(level).value
        except ValueError:
            logger.warning("Ignoring invalid CEFR level %r for %s", level, key)
    return CefrProfile.from_mapping(levels)


def _read_tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(tag) for tag in value)


def lesson_to_document(lesson: Lesson) -> Document:
    return {
        "id": str(lesson.id),
        "createdAt": format_datetime(lesson.created_at),
        "updatedAt": format_datetime(lesson.updated_at),
        "comment": lesson.comment,
        "homework": lesson.homework,
        "tags": list(lesson.tags),
        "billingId": str(lesson.billing_id) if lesson.billing_id else None,
        "isFree": lesson.is_free,
    }


def lesson_from_document(doc: Document) -> Lesson:
    billing_id = doc.get("billingId")
    return Lesson(
        id=LessonId.from_string(doc["id"]),
        created_at=read_datetime(doc.get("createdAt")),
        updated_at=read_datetime(doc.get("updatedAt")),
        billing_id=ContractId.from_string(billing_id) if billing_id else None,
        is_free=bool(doc.get("isFree", False)),
        comment=doc.get("comment") or "",
        homework=doc.get("homework") or "",
        tags=_read_tags(doc.get("tags")),
    )


def contract_to_document(contract: Contract) -> Document:
    price = contract.price_per_lesson
    return {
        "id": str(contract.id),
        "createdAt": format_datetime(contract.created_at),
        "updatedAt": format_datetime(contract.updated_at),
        "mode": contract.mode.value,
        "totalLessons": contract.total_lessons,
        "freeLessons": contract.free_lessons,
        "displayName": contract.display_name,
        "durationMinutes": contract.duration_minutes,
        "customDuration": contract.custom_duration,
        "pricePerLesson": float(price.amount) if price else None,
        "currency": contract.currency,
        "paid": contract.paid,
        "notes": contract.notes,
        "startDate": contract.start_date.isoformat() if contract.start_date else None,
        "endDate": contract.end_date.isoformat() if contract.end_date else None,
        "consumedLessons": contract.consumed_lessons,
        "paidConsumed": contract.paid_consumed,
        "freeConsumed": contract.free_consumed,
        "completed": contract.completed,
        "completedAt": format_datetime(contract.completed_at),
    }


def contract_from_document(doc: Document) -> Contract:
    try:
        mode = ContractMode(doc.get("mode"))
    except ValueError:
        mode = ContractMode.SINGLE
    free_lessons = doc.get("freeLessons")
    return Contract(
        id=ContractId.from_string(doc["id"]),
        mode=mode,
        created_at=read_datetime(doc.get("createdAt")),
        updated_at=read_datetime(doc.get("updatedAt")),
        total_lessons=_read_int(doc.get("totalLessons"), default=0),
        free_lessons=free_lessons if _read_int(free_lessons, default=-1) == free_lessons else None,
        display_name=doc.get("displayName") or "",
        duration_minutes=_read_int(doc.get("durationMinutes"), default=60),
        custom_duration=bool(doc.get("customDuration", False)),
        price_per_lesson=_read_money(doc.get("pricePerLesson")),
        currency=doc.get("currency"),
        paid=bool(doc.get("paid", False)),
        notes=doc.get("notes") or "",
        start_date=_read_date(doc.get("startDate")),
        end_date=_read_date(doc.get("endDate")),
        consumed_lessons=_read_int(doc.get("consumedLessons")),
        paid_consumed=_read_int(doc.get("paidConsumed")),
        free_consumed=_read_int(doc.get("freeConsumed")),
        completed=doc.get("completed") is True,
        completed_at=read_datetime(doc.get("completedAt")),
    )


def student_to_document(student: Student) -> Document:
    return {
        "id": str(student.id),
        "firstName": student.first_name,
        "lastName": student.last_name,
        "email": student.email,
        "description": student.description,
        "isActive": student.is_active,
        "origin": student.origin,
        "goals": student.goals,
        "progress": student.progress,
        "cefr": student.cefr.to_mapping(),
        "photo": student.photo,
        "tags": list(student.tags),
        "sheet": {"createdAt": format_datetime(student.created_at)},
        "updatedAt": format_datetime(student.updated_at),
        "lessons": [lesson_to_document(lesson) for lesson in student.lessons],
        "billingHistory": [
            contract_to_document(contract) for contract in student.billing_history
        ],
    }


def student_from_document(doc: Document) -> Student:
    sheet = doc.get("sheet") or {}
    lessons = doc.get("lessons")
    history = doc.get("billingHistory")
    return Student(
        id=StudentId.from_string(doc["id"]),
        first_name=doc.get("firstName") or "",
        last_name=doc.get("lastName") or "",
        created_at=read_datetime(sheet.get("createdAt")),
        email=doc.get("email") or "",
        description=doc.get("description") or "",
        is_active=bool(doc.get("isActive", True)),
        origin=doc.get("origin") or "",
        goals=doc.get("goals") or "",
        progress=_read_int(doc.get("progress")),
        cefr=_read_cefr(doc.get("cefr")),
        photo=doc.get("photo") or None,
        tags=_read_tags(doc.get("tags")),
        updated_at=read_datetime(doc.get("updatedAt")),
        lessons=tuple(
            lesson_from_document(item) for item in (lessons if isinstance(lessons, list) else [])
        ),
        billing_history=tuple(
            contract_from_document(item) for item in (history if isinstance(history, list) else [])
        ),
    )
