"""Backtracking school timetable solver."""

from .models import (
    Assignment,
    ClassGroup,
    ConstraintSet,
    InvalidConstraintsError,
    Room,
    Subject,
    Teacher,
    load_constraints,
)
from .solver import SolutionDict, solve_timetabling_problem

__all__ = [
    "Assignment",
    "ClassGroup",
    "ConstraintSet",
    "InvalidConstraintsError",
    "Room",
    "SolutionDict",
    "Subject",
    "Teacher",
    "load_constraints",
    "solve_timetabling_problem",
]
