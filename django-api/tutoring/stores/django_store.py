"""Django ORM implementation of the StudentStore."""

from django.db import transaction

from tutoring.domain import (
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
from tutoring.models import ContractRecord, LessonRecord, StudentRecord
from tutoring.stores.interfaces import StudentStore


def _lesson_from_record(record: LessonRecord) -> Lesson:
    return Lesson(
        id=LessonId(record.id),
        created_at=record.created_at,
        updated_at=record.updated_at,
        billing_id=ContractId(record.billing_id) if record.billing_id else None,
        is_free=record.is_free,
        comment=record.comment,
        homework=record.homework,
        tags=tuple(record.tags or ()),
    )


def _contract_from_record(record: ContractRecord) -> Contract:
    return Contract(
        id=ContractId(record.id),
        mode=ContractMode(record.mode),
        created_at=record.created_at,
        updated_at=record.updated_at,
        total_lessons=record.total_lessons,
        free_lessons=record.free_lessons,
        display_name=record.display_name,
        duration_minutes=record.duration_minutes,
        custom_duration=record.custom_duration,
        price_per_lesson=(
            Money(record.price_per_lesson) if record.price_per_lesson is not None else None
        ),
        currency=record.currency,
        paid=record.paid,
        notes=record.notes,
        start_date=record.start_date,
        end_date=record.end_date,
        consumed_lessons=record.consumed_lessons,
        paid_consumed=record.paid_consumed,
        free_consumed=record.free_consumed,
        completed=record.completed,
        completed_at=record.completed_at,
    )


def _student_from_record(record: StudentRecord) -> Student:
    return Student(
        id=StudentId(record.id),
        first_name=record.first_name,
        last_name=record.last_name,
        created_at=record.created_at,
        email=record.email,
        description=record.description,
        is_active=record.is_active,
        origin=record.origin,
        goals=record.goals,
        progress=record.progress,
        cefr=CefrProfile.from_mapping(record.cefr or {}),
        photo=record.photo,
        tags=tuple(record.tags or ()),
        updated_at=record.updated_at,
        lessons=tuple(_lesson_from_record(r) for r in record.lessons.all()),
        billing_history=tuple(_contract_from_record(r) for r in record.contracts.all()),
    )


class DjangoStudentStore(StudentStore):
    """Relational student store using Django ORM."""

    def _queryset(self):
        return StudentRecord.objects.prefetch_related("lessons", "contracts")

    def list_students(self) -> list[Student]:
        return [_student_from_record(r) for r in self._queryset()]

    def load_student(self, student_id: StudentId) -> Student | None:
        record = self._queryset().filter(pk=student_id.value).first()
        if record is None:
            return None
        return _student_from_record(record)

    @transaction.atomic
    def save_student(self, student: Student) -> None:
        record, _ = StudentRecord.objects.update_or_create(
            pk=student.id.value,
            defaults={
                "first_name": student.first_name,
                "last_name": student.last_name,
                "email": student.email,
                "description": student.description,
                "is_active": student.is_active,
                "origin": student.origin,
                "goals": student.goals,
                "progress": student.progress,
                "cefr": student.cefr.to_mapping(),
                "photo": student.photo,
                "tags": list(student.tags),
                "created_at": student.created_at,
                "updated_at": student.updated_at,
            },
        )

        # Children are replaced wholesale so removed lessons/contracts disappear.
        LessonRecord.objects.filter(student=record).delete()
        ContractRecord.objects.filter(student=record).delete()

        ContractRecord.objects.bulk_create(
            ContractRecord(
                id=c.id.value,
                student=record,
                position=position,
                mode=c.mode.value,
                total_lessons=c.total_lessons,
                free_lessons=c.free_lessons,
                display_name=c.display_name,
                duration_minutes=c.duration_minutes,
                custom_duration=c.custom_duration,
                price_per_lesson=c.price_per_lesson.amount if c.price_per_lesson else None,
                currency=c.currency,
                paid=c.paid,
                notes=c.notes,
                start_date=c.start_date,
                end_date=c.end_date,
                consumed_lessons=c.consumed_lessons,
                paid_consumed=c.paid_consumed,
                free_consumed=c.free_consumed,
                completed=c.completed,
                completed_at=c.completed_at,
                created_at=c.created_at,
                updated_at=c.updated_at,
            )
            for position, c in enumerate(student.billing_history)
        )
        LessonRecord.objects.bulk_create(
            LessonRecord(
                id=lesson.id.value,
                student=record,
                billing_id=lesson.billing_id.value if lesson.billing_id else None,
                is_free=lesson.is_free,
                comment=lesson.comment,
                homework=lesson.homework,
                tags=list(lesson.tags),
                created_at=lesson.created_at,
                updated_at=lesson.updated_at,
            )
            for lesson in student.lessons
        )

    def delete_student(self, student_id: StudentId) -> bool:
        deleted, _ = StudentRecord.objects.filter(pk=student_id.value).delete()
        return deleted > 0

    def student_exists(self, student_id: StudentId) -> bool:
        return StudentRecord.objects.filter(pk=student_id.value).exists()
