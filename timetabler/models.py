from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

# The conversational front-end emits camelCase keys ("hoursPerWeek"),
# the Python side uses snake_case. populate_by_name accepts both.
_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True)

NAME_MAX_LENGTH = 100


class Teacher(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    subjects: List[str]  # subject names this teacher is qualified for
    unavailable: Set[Tuple[int, int]] = Field(default_factory=set)  # (day, slot) pairs


class Room(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    # strict: "50", True and 50.0 are rejected rather than coerced
    capacity: int = Field(strict=True, ge=1, le=1000)


class ClassGroup(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    size: int = Field(strict=True, ge=1, le=1000)
    # None means "takes every declared subject"
    subjects: Optional[List[str]] = None


class Subject(BaseModel):
    model_config = _MODEL_CONFIG

    id: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    hours_per_week: int = Field(strict=True, ge=1, le=20, alias="hoursPerWeek")


class ConstraintSet(BaseModel):
    """A complete problem instance, validated before any search starts.

    Names are the identity used in assignments (teacher name, room name,
    subject name), so they must be unique within their collection.
    """

    model_config = _MODEL_CONFIG

    teachers: List[Teacher] = Field(min_length=1)
    rooms: List[Room] = Field(min_length=1)
    classes: List[ClassGroup] = Field(min_length=1)
    subjects: List[Subject] = Field(min_length=1)
    days_per_week: int = Field(strict=True, ge=1, le=7, alias="daysPerWeek")
    slots_per_day: int = Field(strict=True, ge=1, le=12, alias="slotsPerDay")

    @model_validator(mode="after")
    def _check_references(self) -> "ConstraintSet":
        problems: List[str] = []

        for label, values in (
            ("teacher name", [t.name for t in self.teachers]),
            ("room name", [r.name for r in self.rooms]),
            ("class id", [c.id for c in self.classes]),
            ("subject name", [s.name for s in self.subjects]),
        ):
            seen: Set[str] = set()
            for value in values:
                if value in seen:
                    problems.append(f"duplicate {label} {value!r}")
                seen.add(value)

        subject_names = {s.name for s in self.subjects}
        for cls in self.classes:
            for name in cls.subjects or []:
                if name not in subject_names:
                    problems.append(f"class {cls.id!r} requires unknown subject {name!r}")

        for teacher in self.teachers:
            for day, slot in sorted(teacher.unavailable):
                if not (0 <= day < self.days_per_week and 0 <= slot < self.slots_per_day):
                    problems.append(
                        f"teacher {teacher.name!r} unavailable at ({day}, {slot}) "
                        f"outside the {self.days_per_week}x{self.slots_per_day} grid"
                    )

        if problems:
            raise ValueError("; ".join(problems))
        return self

    def curriculum(self, cls: ClassGroup) -> List[Subject]:
        """Subjects the class has to be taught, in declaration order."""
        if cls.subjects is None:
            return list(self.subjects)
        wanted = set(cls.subjects)
        return [s for s in self.subjects if s.name in wanted]


@dataclass(frozen=True)
class Assignment:
    """One session placed at a (day, slot, room) cell."""

    class_id: str
    subject: str
    teacher: str
    room: str
    day: int
    slot: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class InvalidConstraintsError(ValueError):
    """Raised when a constraint document fails structural validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid constraints: " + "; ".join(errors))


def _format_error(error: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    msg = error.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def load_constraints(data: Union[ConstraintSet, Mapping[str, Any]]) -> ConstraintSet:
    """Validate a raw constraint document.

    Raises InvalidConstraintsError listing every problem found.
    """
    if isinstance(data, ConstraintSet):
        return data
    if not isinstance(data, Mapping):
        raise InvalidConstraintsError(["constraint document must be a JSON object"])
    try:
        return ConstraintSet.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidConstraintsError([_format_error(e) for e in exc.errors()]) from exc
