import logging
import threading
import time
from typing import Any, Dict, List, Mapping, Optional, TypedDict, Union

from .models import ConstraintSet, InvalidConstraintsError, load_constraints
from .report import class_timetables, compute_stats, teacher_timetables
from .search import BacktrackingSearch, SearchBudget, SearchOutcome
from .sessions import expand_sessions, order_sessions, unstaffed_subjects

logger = logging.getLogger(__name__)

INVALID_INPUT = "INVALID_INPUT"


class AssignmentDict(TypedDict):
    class_id: str
    subject: str
    teacher: str
    room: str
    day: int  # 0-based day index
    slot: int  # 0-based slot index within the day


class StatsDict(TypedDict, total=False):
    total_sessions: int  # sessions the search had to place
    total_assignments: int
    utilization_rate: float  # assignments / (days * slots) * 100, ignores rooms
    room_utilization_rate: float  # assignments / (days * slots * rooms) * 100
    teacher_loads: Dict[str, int]  # teacher name -> hours placed
    nodes_explored: int  # candidate cells handed to the validity oracle
    backtracks: int
    wall_time_s: float


# total=False: on INVALID_INPUT only status/errors are meaningful
class SolutionDict(TypedDict, total=False):
    status: str  # "FEASIBLE", "INFEASIBLE", "ABORTED" or "INVALID_INPUT"
    timetable: List[AssignmentDict]  # in the order the search committed them
    class_timetables: Dict[str, Dict[str, List[str]]]
    # "c1": {"Monday": ["Math:Dr. Smith@R101", "-", ...], ...}
    teacher_timetables: Dict[str, Dict[str, List[str]]]
    # "Dr. Smith": {"Monday": ["c1-Math@R101", "-", ...], ...}
    stats: StatsDict
    warnings: List[str]  # e.g. subjects dropped because nobody can teach them
    errors: List[str]  # validation problems, or why the search was aborted


def solve_timetabling_problem(
    problem_data: Union[ConstraintSet, Mapping[str, Any]],
    *,
    time_limit_seconds: Optional[float] = None,
    node_limit: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SolutionDict:
    """Build a conflict-free timetable with backtracking search.

    Hard constraints (never violated in a FEASIBLE result):
      • No teacher, room or class is booked twice in the same (day, slot).
      • A teacher is never placed in one of their unavailable slots.
      • Room capacity is at least the class size.
      • Every required hour of every staffed subject is placed.

    Outcomes:
      • INVALID_INPUT: the document failed validation, no search was run.
      • INFEASIBLE: the search was exhaustive and found nothing.
      • ABORTED: the time/node budget ran out or cancel_event was set before
        the search finished; feasibility is unknown.
      • FEASIBLE: the first timetable found.

    Without any limit the search is exhaustive and may take exponential time.
    """
    started = time.perf_counter()

    try:
        constraints = load_constraints(problem_data)
    except InvalidConstraintsError as exc:
        logger.warning("Rejected constraint document: %s", exc)
        return {"status": INVALID_INPUT, "errors": exc.errors, "warnings": []}

    warnings = unstaffed_subjects(constraints)
    for warning in warnings:
        logger.warning(warning)

    sessions = order_sessions(expand_sessions(constraints))
    logger.info(
        "Scheduling %d sessions: %d teachers, %d rooms, %d classes, %d subjects, %dx%d grid",
        len(sessions),
        len(constraints.teachers),
        len(constraints.rooms),
        len(constraints.classes),
        len(constraints.subjects),
        constraints.days_per_week,
        constraints.slots_per_day,
    )

    budget = SearchBudget(
        node_limit=node_limit,
        time_limit_seconds=time_limit_seconds,
        cancel_event=cancel_event,
    )
    result = BacktrackingSearch(constraints, sessions, budget).run()
    assignments = result.assignments
    wall_time = time.perf_counter() - started

    logger.info(
        "Search finished: %s after %d nodes, %d backtracks in %.3fs",
        result.outcome.value,
        result.nodes_explored,
        result.backtracks,
        wall_time,
    )

    stats: StatsDict = {
        "total_sessions": len(sessions),
        "nodes_explored": result.nodes_explored,
        "backtracks": result.backtracks,
        "wall_time_s": wall_time,
    }
    solution: SolutionDict = {
        "status": result.outcome.value,
        "timetable": [],
        "class_timetables": {},
        "teacher_timetables": {},
        "stats": stats,
        "warnings": warnings,
        "errors": [result.abort_reason] if result.abort_reason else [],
    }

    if result.outcome is not SearchOutcome.FEASIBLE:
        return solution

    stats.update(compute_stats(assignments, constraints))  # type: ignore[typeddict-item]
    solution["timetable"] = [a.to_dict() for a in assignments]  # type: ignore[misc]
    solution["class_timetables"] = class_timetables(assignments, constraints)
    solution["teacher_timetables"] = teacher_timetables(assignments, constraints)
    return solution
