"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class StudentId:
    """Unique identifier for a Student."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LessonId:
    """Unique identifier for a Lesson."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContractId:
    """Unique identifier for a billing Contract."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


class ContractMode(Enum):
    """How a contract bills lessons."""

    SINGLE = "single"
    PACKAGE = "package"


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


class CefrLevel(Enum):
    """Common European Framework of Reference level."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


@dataclass(frozen=True)
class CefrProfile:
    """A student's assessed CEFR level per skill. Unassessed skills are None."""

    # Document key for each skill.
    KEYS = {
        "oral": "oral",
        "written": "ecrit",
        "interaction": "interaction",
        "grammar": "grammaire",
        "vocabulary": "vocabulaire",
    }

    oral: CefrLevel | None = None
    written: CefrLevel | None = None
    interaction: CefrLevel | None = None
    grammar: CefrLevel | None = None
    vocabulary: CefrLevel | None = None

    def __post_init__(self) -> None:
        for skill in self.KEYS:
            level = getattr(self, skill)
            if level is not None and not isinstance(level, CefrLevel):
                raise ValueError(f"Invalid CEFR level for {skill}: {level!r}")

    @classmethod
    def from_mapping(cls, data: dict[str, str | None]) -> Self:
        """Build a profile from document keys (``oral``, ``ecrit``...).

        Raises ValueError on an unknown level.
        """
        return cls(
            **{
                skill: CefrLevel(data[key]) if data.get(key) else None
                for skill, key in cls.KEYS.items()
            }
        )

    def to_mapping(self) -> dict[str, str]:
        """Document-keyed levels, omitting unassessed skills."""
        return {
            key: getattr(self, skill).value
            for skill, key in self.KEYS.items()
            if getattr(self, skill) is not None
        }
