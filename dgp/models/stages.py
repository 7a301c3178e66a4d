"""
Stage and Difficulty Enumerations

The weekly drill runs Monday through Friday in a fixed order. Difficulty is
an independent axis that only affects which sentences the pool asks for.
"""

from enum import Enum
from typing import Optional


class Stage(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.MONDAY,
    Stage.TUESDAY,
    Stage.WEDNESDAY,
    Stage.THURSDAY,
    Stage.FRIDAY,
)


def stage_index(stage: Stage) -> int:
    return STAGE_ORDER.index(stage)


def next_stage(stage: Stage) -> Optional[Stage]:
    """Return the stage after *stage*, or None for Friday (terminal)."""
    idx = stage_index(stage)
    if idx + 1 < len(STAGE_ORDER):
        return STAGE_ORDER[idx + 1]
    return None
