from typing import Dict, List

from .models import Assignment, ConstraintSet

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

EMPTY_CELL = "-"


def day_labels(constraints: ConstraintSet) -> List[str]:
    return DAY_NAMES[: constraints.days_per_week]


def compute_stats(assignments: List[Assignment], constraints: ConstraintSet) -> Dict[str, object]:
    """Summary figures for a finished timetable.

    utilization_rate divides by days x slots only, so with several rooms it
    can exceed 100%. It is kept that way for existing consumers;
    room_utilization_rate is the per-room-cell figure.
    """
    grid_cells = constraints.days_per_week * constraints.slots_per_day
    room_cells = grid_cells * len(constraints.rooms)

    teacher_loads: Dict[str, int] = {}
    for a in assignments:
        teacher_loads[a.teacher] = teacher_loads.get(a.teacher, 0) + 1

    return {
        "total_assignments": len(assignments),
        "utilization_rate": len(assignments) / grid_cells * 100,
        "room_utilization_rate": len(assignments) / room_cells * 100,
        "teacher_loads": teacher_loads,
    }


def class_timetables(
    assignments: List[Assignment], constraints: ConstraintSet
) -> Dict[str, Dict[str, List[str]]]:
    # class id -> day name -> ["Math:Dr. Smith@R101", "-", ...]
    days = day_labels(constraints)
    grids = {
        cls.id: {day: [EMPTY_CELL] * constraints.slots_per_day for day in days}
        for cls in constraints.classes
    }
    for a in assignments:
        grids[a.class_id][days[a.day]][a.slot] = f"{a.subject}:{a.teacher}@{a.room}"
    return grids


def teacher_timetables(
    assignments: List[Assignment], constraints: ConstraintSet
) -> Dict[str, Dict[str, List[str]]]:
    # teacher name -> day name -> ["c1-Math@R101", "-", ...]
    days = day_labels(constraints)
    grids = {
        t.name: {day: [EMPTY_CELL] * constraints.slots_per_day for day in days}
        for t in constraints.teachers
    }
    for a in assignments:
        grids[a.teacher][days[a.day]][a.slot] = f"{a.class_id}-{a.subject}@{a.room}"
    return grids
