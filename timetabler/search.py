"""Depth-first backtracking over the ordered session list.

Each session in turn tries the cells of the week in a fixed order (day, then
slot, then room in declaration order). The first cell the oracle accepts is
committed and the search moves on; when a session runs out of cells the
previous commitment is undone and that session resumes from its next cell.
The first complete timetable found is returned.

Instead of recursing once per session, the engine keeps one cursor per
session (the index of the next cell to try). This keeps deep instances off
the interpreter's call stack and lets the budget check abort at any point.
"""

import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .models import Assignment, ConstraintSet
from .oracle import CommittedSet, ValidityOracle
from .sessions import Session

logger = logging.getLogger(__name__)


class SearchOutcome(str, enum.Enum):
    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"  # exhaustive search proved there is no timetable
    ABORTED = "ABORTED"  # budget ran out or cancelled, feasibility unknown


@dataclass
class SearchBudget:
    node_limit: Optional[int] = None  # max candidate cells evaluated
    time_limit_seconds: Optional[float] = None
    cancel_event: Optional[threading.Event] = None


@dataclass
class SearchResult:
    outcome: SearchOutcome
    assignments: List[Assignment] = field(default_factory=list)
    nodes_explored: int = 0
    backtracks: int = 0
    abort_reason: Optional[str] = None


Cell = Tuple[int, int, str]


class BacktrackingSearch:
    def __init__(
        self,
        constraints: ConstraintSet,
        sessions: List[Session],
        budget: Optional[SearchBudget] = None,
    ):
        self.sessions = sessions
        self.budget = budget or SearchBudget()
        self.oracle = ValidityOracle(constraints)
        self.cells: List[Cell] = [
            (day, slot, room.name)
            for day in range(constraints.days_per_week)
            for slot in range(constraints.slots_per_day)
            for room in constraints.rooms
        ]
        self.nodes_explored = 0
        self.backtracks = 0
        self._deadline: Optional[float] = None

    def _exhausted(self) -> Optional[str]:
        budget = self.budget
        if budget.cancel_event is not None and budget.cancel_event.is_set():
            return "cancelled"
        if budget.node_limit is not None and self.nodes_explored >= budget.node_limit:
            return f"node limit of {budget.node_limit} reached"
        if self._deadline is not None and time.perf_counter() >= self._deadline:
            return f"time limit of {budget.time_limit_seconds}s reached"
        return None

    def _result(self, outcome: SearchOutcome, committed: CommittedSet, reason=None) -> SearchResult:
        return SearchResult(
            outcome=outcome,
            assignments=committed.snapshot() if outcome is SearchOutcome.FEASIBLE else [],
            nodes_explored=self.nodes_explored,
            backtracks=self.backtracks,
            abort_reason=reason,
        )

    def run(self) -> SearchResult:
        if self.budget.time_limit_seconds is not None:
            self._deadline = time.perf_counter() + self.budget.time_limit_seconds

        n = len(self.sessions)
        committed = CommittedSet()
        cursors = [0] * n
        depth = 0

        while depth < n:
            session = self.sessions[depth]
            placed = False

            while cursors[depth] < len(self.cells):
                reason = self._exhausted()
                if reason is not None:
                    logger.info("Search aborted at depth %d/%d: %s", depth, n, reason)
                    return self._result(SearchOutcome.ABORTED, committed, reason)

                day, slot, room = self.cells[cursors[depth]]
                cursors[depth] += 1
                self.nodes_explored += 1

                candidate = Assignment(
                    class_id=session.class_id,
                    subject=session.subject,
                    teacher=session.teacher,
                    room=room,
                    day=day,
                    slot=slot,
                )
                if self.oracle.is_valid(candidate, committed.in_cell(day, slot)):
                    committed.push(candidate)
                    placed = True
                    break

            if placed:
                depth += 1
                if depth < n:
                    cursors[depth] = 0
                continue

            # dead end: this session has no cell left along the current path
            if depth == 0:
                return self._result(SearchOutcome.INFEASIBLE, committed)
            depth -= 1
            committed.pop()
            self.backtracks += 1

        return self._result(SearchOutcome.FEASIBLE, committed)
