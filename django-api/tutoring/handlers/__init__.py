from tutoring.handlers.views import (
    ContractDetailView,
    ContractListView,
    LessonDetailView,
    LessonListView,
    StudentDetailView,
    StudentListView,
)

__all__ = [
    "ContractDetailView",
    "ContractListView",
    "LessonDetailView",
    "LessonListView",
    "StudentDetailView",
    "StudentListView",
]
