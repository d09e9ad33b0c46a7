"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models


class StudentRecord(models.Model):
    """Persistence model for students."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    email = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    origin = models.CharField(max_length=100, blank=True)
    goals = models.TextField(blank=True)
    progress = models.PositiveSmallIntegerField(default=0)
    cefr = models.JSONField(default=dict, blank=True)
    photo = models.TextField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["last_name", "first_name"], name="student_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ContractRecord(models.Model):
    """Persistence model for billing contracts."""

    class Mode(models.TextChoices):
        SINGLE = "single", "Single lesson"
        PACKAGE = "package", "Lesson pack"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        StudentRecord, on_delete=models.CASCADE, related_name="contracts"
    )
    position = models.PositiveIntegerField(default=0)
    mode = models.CharField(max_length=16, choices=Mode.choices, default=Mode.SINGLE)
    total_lessons = models.IntegerField(default=1)
    free_lessons = models.IntegerField(null=True, blank=True, default=0)
    display_name = models.CharField(max_length=255, blank=True)
    duration_minutes = models.PositiveIntegerField(default=60)
    custom_duration = models.BooleanField(default=False)
    price_per_lesson = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    currency = models.CharField(max_length=3, null=True, blank=True)
    paid = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    consumed_lessons = models.PositiveIntegerField(default=0)
    paid_consumed = models.PositiveIntegerField(default=0)
    free_consumed = models.PositiveIntegerField(default=0)
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["position"]
        indexes = [
            models.Index(fields=["student", "position"], name="contract_position_idx"),
        ]

    def __str__(self) -> str:
        if self.display_name or self.created_at is None:
            return self.display_name or self.get_mode_display()
        return f"{self.get_mode_display()} - {self.created_at:%Y-%m-%d}"


class LessonRecord(models.Model):
    """Persistence model for lessons.

    ``billing_id`` is a plain column, not a foreign key: lessons keep the id
    of a contract after that contract is deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        StudentRecord, on_delete=models.CASCADE, related_name="lessons"
    )
    billing_id = models.UUIDField(null=True, blank=True)
    is_free = models.BooleanField(default=False)
    comment = models.TextField(blank=True)
    homework = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["student", "created_at"], name="lesson_created_idx"),
            models.Index(fields=["billing_id"], name="lesson_billing_idx"),
        ]

    def __str__(self) -> str:
        if self.created_at is None:
            return f"{self.student} - undated"
        return f"{self.student} - {self.created_at:%Y-%m-%d %H:%M}"
