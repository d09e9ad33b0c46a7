import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StudentRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("first_name", models.CharField(blank=True, max_length=150)),
                ("last_name", models.CharField(blank=True, max_length=150)),
                ("email", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("origin", models.CharField(blank=True, max_length=100)),
                ("goals", models.TextField(blank=True)),
                ("progress", models.PositiveSmallIntegerField(default=0)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["last_name", "first_name"],
                "indexes": [
                    models.Index(fields=["last_name", "first_name"], name="student_name_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ContractRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("position", models.PositiveIntegerField(default=0)),
                ("mode", models.CharField(choices=[("single", "Single lesson"), ("package", "Lesson pack")], default="single", max_length=16)),
                ("total_lessons", models.IntegerField(default=1)),
                ("free_lessons", models.IntegerField(blank=True, default=0, null=True)),
                ("display_name", models.CharField(blank=True, max_length=255)),
                ("duration_minutes", models.PositiveIntegerField(default=60)),
                ("custom_duration", models.BooleanField(default=False)),
                ("price_per_lesson", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("currency", models.CharField(blank=True, max_length=3, null=True)),
                ("paid", models.BooleanField(default=False)),
                ("notes", models.TextField(blank=True)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("consumed_lessons", models.PositiveIntegerField(default=0)),
                ("paid_consumed", models.PositiveIntegerField(default=0)),
                ("free_consumed", models.PositiveIntegerField(default=0)),
                ("completed", models.BooleanField(default=False)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contracts", to="tutoring.studentrecord")),
            ],
            options={
                "ordering": ["position"],
                "indexes": [
                    models.Index(fields=["student", "position"], name="contract_position_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="LessonRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("billing_id", models.UUIDField(blank=True, null=True)),
                ("is_free", models.BooleanField(default=False)),
                ("comment", models.TextField(blank=True)),
                ("homework", models.TextField(blank=True)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lessons", to="tutoring.studentrecord")),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["student", "created_at"], name="lesson_created_idx"),
                    models.Index(fields=["billing_id"], name="lesson_billing_idx"),
                ],
            },
        ),
    ]
