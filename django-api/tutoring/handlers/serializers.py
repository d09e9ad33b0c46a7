"""Serializers for request validation and domain model responses.

Responses use the camelCase keys of the student document. Input serializers
map those keys back to snake_case through ``source`` so ``validated_data`` can
be handed to the service as-is.
"""

from rest_framework import serializers

from tutoring.domain import CefrLevel, Contract, Student
from tutoring.domain.billing import contract_capacity, progress_percent


class LessonSerializer(serializers.Serializer):
    """Serializer for Lesson domain model."""

    id = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    billingId = serializers.CharField(source="billing_id")
    isFree = serializers.BooleanField(source="is_free")
    comment = serializers.CharField()
    homework = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField())


class ContractSerializer(serializers.Serializer):
    """Serializer for Contract domain model."""

    id = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    mode = serializers.CharField(source="mode.value")
    totalLessons = serializers.IntegerField(source="total_lessons")
    freeLessons = serializers.IntegerField(source="free_lessons")
    displayName = serializers.CharField(source="display_name")
    durationMinutes = serializers.IntegerField(source="duration_minutes")
    customDuration = serializers.BooleanField(source="custom_duration")
    pricePerLesson = serializers.SerializerMethodField()
    currency = serializers.CharField()
    paid = serializers.BooleanField()
    notes = serializers.CharField()
    startDate = serializers.DateField(source="start_date")
    endDate = serializers.DateField(source="end_date")
    consumedLessons = serializers.IntegerField(source="consumed_lessons")
    paidConsumed = serializers.IntegerField(source="paid_consumed")
    freeConsumed = serializers.IntegerField(source="free_consumed")
    completed = serializers.BooleanField()
    completedAt = serializers.DateTimeField(source="completed_at")
    capacity = serializers.SerializerMethodField()
    progressPercent = serializers.SerializerMethodField()

    def get_pricePerLesson(self, contract: Contract) -> str | None:
        if contract.price_per_lesson is None:
            return None
        return str(contract.price_per_lesson)

    def get_capacity(self, contract: Contract) -> int:
        return contract_capacity(contract)

    def get_progressPercent(self, contract: Contract) -> int:
        return progress_percent(contract)


class StudentSerializer(serializers.Serializer):
    """Serializer for the Student aggregate."""

    id = serializers.CharField()
    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    email = serializers.CharField()
    description = serializers.CharField()
    isActive = serializers.BooleanField(source="is_active")
    origin = serializers.CharField()
    goals = serializers.CharField()
    progress = serializers.IntegerField()
    cefr = serializers.SerializerMethodField()
    photo = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField())
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    lessons = LessonSerializer(many=True)
    billingHistory = ContractSerializer(source="billing_history", many=True)

    def get_cefr(self, student: Student) -> dict[str, str]:
        return student.cefr.to_mapping()


class StudentSummarySerializer(serializers.Serializer):
    """Serializer for a student list entry."""

    def to_representation(self, instance):
        data = StudentSerializer(instance.student).data
        data["billingActiveCount"] = instance.billing_active_count
        return data


CEFR_LEVELS = [level.value for level in CefrLevel]


class CefrInputSerializer(serializers.Serializer):
    """Validates CEFR levels keyed by skill."""

    oral = serializers.ChoiceField(choices=CEFR_LEVELS, allow_null=True, required=False)
    ecrit = serializers.ChoiceField(
        source="written", choices=CEFR_LEVELS, allow_null=True, required=False
    )
    interaction = serializers.ChoiceField(
        choices=CEFR_LEVELS, allow_null=True, required=False
    )
    grammaire = serializers.ChoiceField(
        source="grammar", choices=CEFR_LEVELS, allow_null=True, required=False
    )
    vocabulaire = serializers.ChoiceField(
        source="vocabulary", choices=CEFR_LEVELS, allow_null=True, required=False
    )


class StudentInputSerializer(serializers.Serializer):
    """Validates student create and update payloads."""

    firstName = serializers.CharField(source="first_name", allow_blank=True, required=False)
    lastName = serializers.CharField(source="last_name", allow_blank=True, required=False)
    email = serializers.EmailField(allow_blank=True, required=False)
    description = serializers.CharField(allow_blank=True, required=False)
    isActive = serializers.BooleanField(source="is_active", required=False)
    origin = serializers.CharField(allow_blank=True, max_length=100, required=False)
    goals = serializers.CharField(allow_blank=True, required=False)
    progress = serializers.IntegerField(min_value=0, max_value=100, required=False)
    cefr = CefrInputSerializer(required=False)
    photo = serializers.CharField(allow_null=True, allow_blank=True, required=False)
    tags = serializers.ListField(child=serializers.CharField(), required=False)


class LessonInputSerializer(serializers.Serializer):
    """Validates lesson create and update payloads."""

    createdAt = serializers.DateTimeField(source="created_at", required=False)
    billingId = serializers.UUIDField(source="billing_id", allow_null=True, required=False)
    comment = serializers.CharField(allow_blank=True, required=False)
    homework = serializers.CharField(allow_blank=True, required=False)
    tags = serializers.ListField(child=serializers.CharField(), required=False)


class ContractInputSerializer(serializers.Serializer):
    """Validates contract create and update payloads.

    Progress fields (consumedLessons, completed...) are not accepted: only
    reconciliation writes them.
    """

    mode = serializers.ChoiceField(choices=["single", "package"], required=False)
    totalLessons = serializers.IntegerField(source="total_lessons", min_value=1, required=False)
    freeLessons = serializers.IntegerField(source="free_lessons", min_value=0, required=False)
    displayName = serializers.CharField(
        source="display_name", allow_blank=True, max_length=255, required=False
    )
    durationMinutes = serializers.IntegerField(
        source="duration_minutes", min_value=1, required=False
    )
    customDuration = serializers.BooleanField(source="custom_duration", required=False)
    pricePerLesson = serializers.DecimalField(
        source="price_per_lesson",
        max_digits=10,
        decimal_places=2,
        min_value=0,
        allow_null=True,
        required=False,
    )
    currency = serializers.CharField(max_length=3, allow_null=True, required=False)
    paid = serializers.BooleanField(required=False)
    notes = serializers.CharField(allow_blank=True, required=False)
    startDate = serializers.DateField(source="start_date", allow_null=True, required=False)
    endDate = serializers.DateField(source="end_date", allow_null=True, required=False)
