"""Billing-progress reconciliation.

Pure functions over the Student aggregate. Given a student's lessons and
contracts, decide which lesson consumes a paid slot and which consumes a free
slot, then recompute each contract's counters and completion state.

Nothing here performs I/O. The only ambient input is the wall clock, used for
``completed_at`` and ``updated_at`` stamps, and it can be supplied explicitly.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from tutoring.domain.models import Contract, Lesson, Student
from tutoring.domain.value_objects import ContractId, ContractMode


# Undated legacy records sort before every dated one.
UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def chronological_key(item: Lesson | Contract) -> datetime:
    """Sort key on ``created_at`` that tolerates undated records."""
    return item.created_at or UNDATED


def _as_count(value: object) -> int:
    """Return ``value`` if it is a real integer, otherwise 0."""
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def normalize_contract(contract: Contract) -> Contract:
    """Default ``free_lessons`` for packages and force it to 0 for singles."""
    if contract.mode is ContractMode.PACKAGE:
        free_lessons = _as_count(contract.free_lessons)
    else:
        free_lessons = 0
    if free_lessons == contract.free_lessons:
        return contract
    return replace(contract, free_lessons=free_lessons)


def paid_total(contract: Contract) -> int:
    if contract.mode is ContractMode.PACKAGE:
        return _as_count(contract.total_lessons)
    return 1


def free_total(contract: Contract) -> int:
    if contract.mode is ContractMode.PACKAGE:
        return _as_count(contract.free_lessons)
    return 0


def contract_capacity(contract: Contract) -> int:
    """Paid plus free slots, as the engine counts them."""
    return max(0, paid_total(contract)) + max(0, free_total(contract))


@dataclass
class _SlotCounter:
    paid_total: int
    free_total: int
    paid_consumed: int = 0
    free_consumed: int = 0

    def consume(self) -> bool:
        """Consume the next slot and return whether it was a free one."""
        if self.paid_consumed < self.paid_total:
            self.paid_consumed += 1
            return False
        if self.free_consumed < self.free_total:
            self.free_consumed += 1
            return True
        # Over capacity: counted as paid.
        self.paid_consumed += 1
        return False


def reconcile(student: Student, now: datetime | None = None) -> Student:
    """Recompute paid/free flags and contract progress for one student.

    Lessons are walked in ascending ``created_at`` order so that free slots
    are only consumed once the paid slots of the same contract are exhausted.
    Lessons without a ``billing_id``, or pointing at an unknown contract, keep
    their current ``is_free`` value.

    Returns a new Student with lessons in chronological order and contracts in
    their original order.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    contracts = [normalize_contract(c) for c in student.billing_history]
    counters: dict[ContractId, _SlotCounter] = {
        c.id: _SlotCounter(paid_total=paid_total(c), free_total=free_total(c))
        for c in contracts
    }

    lessons: list[Lesson] = []
    linked: dict[ContractId, int] = {}
    for lesson in sorted(student.lessons, key=chronological_key):
        if lesson.billing_id is not None:
            linked[lesson.billing_id] = linked.get(lesson.billing_id, 0) + 1
            counter = counters.get(lesson.billing_id)
            if counter is not None:
                is_free = counter.consume()
                if is_free != lesson.is_free:
                    lesson = replace(lesson, is_free=is_free)
        lessons.append(lesson)

    updated: list[Contract] = []
    for contract in contracts:
        counter = counters[contract.id]
        consumed = linked.get(contract.id, 0)
        capacity = contract_capacity(contract)
        completed = capacity > 0 and consumed >= capacity
        if not completed:
            completed_at = None
        else:
            completed_at = contract.completed_at or now
        updated.append(
            replace(
                contract,
                consumed_lessons=consumed,
                paid_consumed=counter.paid_consumed,
                free_consumed=counter.free_consumed,
                completed=completed,
                completed_at=completed_at,
                updated_at=now,
            )
        )

    return replace(student, lessons=tuple(lessons), billing_history=tuple(updated))


def latest_open_contract(student: Student) -> Contract | None:
    """Return the most recently created contract that is not completed.

    Contracts sharing a ``created_at`` are ordered by id, greatest first.
    """
    ordered = sorted(
        student.billing_history,
        key=lambda c: (chronological_key(c), str(c.id)),
        reverse=True,
    )
    for contract in ordered:
        if not contract.completed:
            return contract
    return None


def active_contract_count(student: Student) -> int:
    """Count contracts that are neither flagged completed nor full by count.

    The stored ``completed`` flag may be stale relative to the counters, so
    both are checked.
    """
    active = 0
    for contract in student.billing_history:
        done_by_flag = contract.completed is True
        total = _as_count(contract.total_lessons) + _as_count(contract.free_lessons)
        done_by_count = total > 0 and _as_count(contract.consumed_lessons) >= total
        if not (done_by_flag or done_by_count):
            active += 1
    return active


def progress_percent(contract: Contract) -> int:
    """Share of the paid slots used, capped at 100."""
    total = paid_total(contract)
    if total <= 0:
        return 0
    return min(100, round(contract.consumed_lessons / total * 100))


def generate_display_name(
    mode: ContractMode, total_lessons: int, existing: Iterable[Contract]
) -> str:
    """Build a name that tells apart contracts of the same shape."""
    if mode is ContractMode.SINGLE:
        same = [c for c in existing if c.mode is ContractMode.SINGLE]
        return f"Single lesson ({len(same) + 1})"
    same = [
        c
        for c in existing
        if c.mode is ContractMode.PACKAGE and c.total_lessons == total_lessons
    ]
    return f"Pack of {total_lessons} lessons ({len(same) + 1})"
