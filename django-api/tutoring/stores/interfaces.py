"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from tutoring.domain import Student, StudentId


class StudentStore(ABC):
    """Interface for student aggregate persistence operations."""

    @abstractmethod
    def list_students(self) -> list[Student]:
        """Return every student aggregate, in storage order."""
        ...

    @abstractmethod
    def load_student(self, student_id: StudentId) -> Student | None:
        """Return a student aggregate by ID, or None if not found."""
        ...

    @abstractmethod
    def save_student(self, student: Student) -> None:
        """Insert or fully replace a student aggregate, lessons and contracts included."""
        ...

    @abstractmethod
    def delete_student(self, student_id: StudentId) -> bool:
        """Remove a student aggregate. Return False if it did not exist."""
        ...

    @abstractmethod
    def student_exists(self, student_id: StudentId) -> bool:
        """Check if a student exists."""
        ...
