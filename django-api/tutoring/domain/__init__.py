from tutoring.domain.models import Contract, Lesson, Student, StudentSummary
from tutoring.domain.value_objects import (
    CefrLevel,
    CefrProfile,
    ContractId,
    ContractMode,
    LessonId,
    Money,
    StudentId,
)

__all__ = [
    "Contract",
    "Lesson",
    "Student",
    "StudentSummary",
    "CefrLevel",
    "CefrProfile",
    "ContractId",
    "ContractMode",
    "LessonId",
    "Money",
    "StudentId",
]
