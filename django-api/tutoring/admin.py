from django.contrib import admin

from tutoring.models import ContractRecord, LessonRecord, StudentRecord


class ContractInline(admin.TabularInline):
    model = ContractRecord
    extra = 0
    readonly_fields = [
        "consumed_lessons",
        "paid_consumed",
        "free_consumed",
        "completed",
        "completed_at",
    ]


class LessonInline(admin.TabularInline):
    model = LessonRecord
    extra = 0
    readonly_fields = ["is_free"]


@admin.register(StudentRecord)
class StudentAdmin(admin.ModelAdmin):
    list_display = ["last_name", "first_name", "email", "is_active", "created_at"]
    list_filter = ["is_active", "origin"]
    search_fields = ["first_name", "last_name", "email"]
    inlines = [ContractInline, LessonInline]


@admin.register(ContractRecord)
class ContractAdmin(admin.ModelAdmin):
    list_display = ["display_name", "student", "mode", "consumed_lessons", "completed"]
    list_filter = ["mode", "completed", "paid"]
    readonly_fields = ContractInline.readonly_fields


@admin.register(LessonRecord)
class LessonAdmin(admin.ModelAdmin):
    list_display = ["student", "created_at", "billing_id", "is_free"]
    list_filter = ["is_free"]
