from collections import Counter, defaultdict
from typing import DefaultDict, Dict, Iterable, List, Set, Tuple

from .models import Assignment, ConstraintSet
from .sessions import expand_sessions


class ValidityOracle:
    """Decides whether a candidate assignment may join the committed set."""

    def __init__(self, constraints: ConstraintSet):
        self.room_capacity: Dict[str, int] = {r.name: r.capacity for r in constraints.rooms}
        self.class_size: Dict[str, int] = {c.id: c.size for c in constraints.classes}
        self.unavailable: Dict[str, Set[Tuple[int, int]]] = {
            t.name: set(t.unavailable) for t in constraints.teachers
        }

    def is_valid(self, candidate: Assignment, committed: Iterable[Assignment]) -> bool:
        capacity = self.room_capacity.get(candidate.room)
        size = self.class_size.get(candidate.class_id)
        if capacity is not None and size is not None and capacity < size:
            return False

        if (candidate.day, candidate.slot) in self.unavailable.get(candidate.teacher, ()):
            return False

        for existing in committed:
            if existing.day != candidate.day or existing.slot != candidate.slot:
                continue
            if (
                existing.teacher == candidate.teacher
                or existing.room == candidate.room
                or existing.class_id == candidate.class_id
            ):
                return False
        return True


class CommittedSet:
    """Assignments fixed along the current search path.

    Grows and shrinks in strict LIFO order. Keeps a per-(day, slot) index so
    the oracle only has to look at assignments sharing the candidate's cell.
    """

    def __init__(self) -> None:
        self._stack: List[Assignment] = []
        self._by_cell: DefaultDict[Tuple[int, int], List[Assignment]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self):
        return iter(self._stack)

    def push(self, assignment: Assignment) -> None:
        self._stack.append(assignment)
        self._by_cell[(assignment.day, assignment.slot)].append(assignment)

    def pop(self) -> Assignment:
        assignment = self._stack.pop()
        self._by_cell[(assignment.day, assignment.slot)].pop()
        return assignment

    def in_cell(self, day: int, slot: int) -> List[Assignment]:
        return self._by_cell.get((day, slot), [])

    def snapshot(self) -> List[Assignment]:
        return list(self._stack)


def find_violations(assignments: List[Assignment], constraints: ConstraintSet) -> List[str]:
    """Audit a finished timetable against every hard constraint.

    Returns human-readable violations; an empty list means the timetable is valid.
    """
    violations: List[str] = []
    oracle = ValidityOracle(constraints)

    for key_name in ("teacher", "room", "class_id"):
        seen: Counter = Counter(
            (a.day, a.slot, getattr(a, key_name)) for a in assignments
        )
        for (day, slot, value), count in sorted(seen.items()):
            if count > 1:
                violations.append(
                    f"{key_name} {value!r} double-booked {count} times at day {day} slot {slot}"
                )

    for a in assignments:
        if (a.day, a.slot) in oracle.unavailable.get(a.teacher, ()):
            violations.append(f"teacher {a.teacher!r} unavailable at day {a.day} slot {a.slot}")
        capacity = oracle.room_capacity.get(a.room)
        size = oracle.class_size.get(a.class_id)
        if capacity is not None and size is not None and capacity < size:
            violations.append(
                f"room {a.room!r} (capacity {capacity}) too small for class {a.class_id!r} (size {size})"
            )

    expected = Counter((s.class_id, s.subject) for s in expand_sessions(constraints))
    actual = Counter((a.class_id, a.subject) for a in assignments)
    for key in sorted(set(expected) | set(actual)):
        if expected[key] != actual[key]:
            class_id, subject = key
            violations.append(
                f"class {class_id!r} subject {subject!r}: expected {expected[key]} hour(s), "
                f"got {actual[key]}"
            )

    return violations
