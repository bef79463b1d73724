"""
Pytest configuration and fixtures for the timetabler tests.
"""

import copy
import json
import logging
from pathlib import Path

import pytest

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

PACKAGE_DIR = Path(__file__).resolve().parents[1] / "timetabler"


@pytest.fixture
def document_factory():
    """Build a small constraint document, overriding any top-level key."""

    base = {
        "teachers": [{"id": "t1", "name": "T1", "subjects": ["Math"]}],
        "rooms": [{"id": "r1", "name": "R1", "capacity": 50}],
        "classes": [{"id": "c1", "name": "Class 1", "size": 45}],
        "subjects": [{"id": "s1", "name": "Math", "hoursPerWeek": 1}],
        "daysPerWeek": 5,
        "slotsPerDay": 6,
    }

    def build(**overrides):
        doc = copy.deepcopy(base)
        doc.update(overrides)
        return doc

    return build


@pytest.fixture
def example_document():
    """The demo document served by GET /example."""
    with (PACKAGE_DIR / "example.json").open("r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def backtracking_document(document_factory):
    """Two classes, one room, a 1x2 grid: first-fit fails, one backtrack fixes it.

    c1/Math goes to slot 0 first, which leaves c2/Art only slot 1, where
    its teacher is unavailable.
    """
    return document_factory(
        teachers=[
            {"id": "t1", "name": "T1", "subjects": ["Math"]},
            {"id": "t2", "name": "T2", "subjects": ["Art"], "unavailable": [[0, 1]]},
        ],
        classes=[
            {"id": "c1", "name": "Class 1", "size": 20, "subjects": ["Math"]},
            {"id": "c2", "name": "Class 2", "size": 20, "subjects": ["Art"]},
        ],
        subjects=[
            {"id": "s1", "name": "Math", "hoursPerWeek": 1},
            {"id": "s2", "name": "Art", "hoursPerWeek": 1},
        ],
        daysPerWeek=1,
        slotsPerDay=2,
    )
