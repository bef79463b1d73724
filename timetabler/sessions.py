from dataclasses import dataclass
from typing import List

from .models import ConstraintSet, Teacher


@dataclass(frozen=True)
class Session:
    """One required teaching hour of one subject for one class.

    The teacher is bound up front: the search only chooses day, slot and room.
    Subject and teacher are held by name, the identity assignments use.
    """

    class_id: str
    subject: str
    teacher: str
    priority: float


def qualified_teachers(constraints: ConstraintSet, subject_name: str) -> List[Teacher]:
    return [t for t in constraints.teachers if subject_name in t.subjects]


def expand_sessions(constraints: ConstraintSet) -> List[Session]:
    """Flatten the curriculum into one Session per (class, subject, hour).

    Each session goes to the first qualified teacher in declaration order.
    Subjects nobody can teach produce no sessions (see unstaffed_subjects).
    """
    sessions: List[Session] = []
    for cls in constraints.classes:
        for subject in constraints.curriculum(cls):
            teachers = qualified_teachers(constraints, subject.name)
            if not teachers:
                continue
            # fewer qualified teachers -> smaller assignment space -> try earlier
            priority = 100 / len(teachers)
            for _ in range(subject.hours_per_week):
                sessions.append(Session(cls.id, subject.name, teachers[0].name, priority))
    return sessions


def unstaffed_subjects(constraints: ConstraintSet) -> List[str]:
    """Warnings for every (class, subject) pair dropped for lack of a teacher."""
    warnings: List[str] = []
    for cls in constraints.classes:
        for subject in constraints.curriculum(cls):
            if not qualified_teachers(constraints, subject.name):
                warnings.append(
                    f"No qualified teacher for subject {subject.name!r}: "
                    f"{subject.hours_per_week} hour(s) for class {cls.id!r} not scheduled"
                )
    return warnings


def order_sessions(sessions: List[Session]) -> List[Session]:
    # sorted() is stable, so equal priorities keep (class, subject) order
    return sorted(sessions, key=lambda s: s.priority, reverse=True)
