"""Domain error codes for the tutoring module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    STUDENT_NOT_FOUND = "STUDENT_NOT_FOUND"
    LESSON_NOT_FOUND = "LESSON_NOT_FOUND"
    CONTRACT_NOT_FOUND = "CONTRACT_NOT_FOUND"
    INVALID_ID = "INVALID_ID"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class StudentNotFoundError(DomainError):
    """Raised when a student is not found."""

    def __init__(self, student_id: str) -> None:
        super().__init__(
            code=ErrorCode.STUDENT_NOT_FOUND,
            message="Student not found",
        )
        self.student_id = student_id


class LessonNotFoundError(DomainError):
    """Raised when a lesson is not found on a student."""

    def __init__(self, lesson_id: str) -> None:
        super().__init__(
            code=ErrorCode.LESSON_NOT_FOUND,
            message="Lesson not found",
        )
        self.lesson_id = lesson_id


class ContractNotFoundError(DomainError):
    """Raised when a billing contract is not found on a student."""

    def __init__(self, contract_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONTRACT_NOT_FOUND,
            message="Contract not found",
        )
        self.contract_id = contract_id


class InvalidIdError(DomainError):
    """Raised when a student, lesson or contract ID is malformed."""

    def __init__(self, kind: str = "ID") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} format",
        )
