from django.urls import path

from tutoring.handlers import (
    ContractDetailView,
    ContractListView,
    LessonDetailView,
    LessonListView,
    StudentDetailView,
    StudentListView,
)

urlpatterns = [
    path("students", StudentListView.as_view(), name="student-list"),
    path("students/<str:student_id>", StudentDetailView.as_view(), name="student-detail"),
    path(
        "students/<str:student_id>/lessons",
        LessonListView.as_view(),
        name="lesson-list",
    ),
    path(
        "students/<str:student_id>/lessons/<str:lesson_id>",
        LessonDetailView.as_view(),
        name="lesson-detail",
    ),
    path(
        "students/<str:student_id>/contracts",
        ContractListView.as_view(),
        name="contract-list",
    ),
    path(
        "students/<str:student_id>/contracts/<str:contract_id>",
        ContractDetailView.as_view(),
        name="contract-detail",
    ),
]
