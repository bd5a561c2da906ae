"""Shared constants and enumerations for grid synthesis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


DEFAULT_GRID_SIZE = 15
MIN_ANSWER_LENGTH = 2


class Difficulty(str, Enum):
    """Question difficulty labels. Informational only, never used for placement."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, label: Optional[str]) -> "Difficulty":
        if not label:
            return cls.MEDIUM
        wanted = str(label).strip().lower()
        for level in cls:
            if level.value.lower() == wanted:
                return level
        return cls.MEDIUM


class Orientation(str, Enum):
    """Word directions supported by the grid."""

    ACROSS = "across"
    DOWN = "down"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Orientation.ACROSS else (1, 0)

    @property
    def perpendicular(self) -> "Orientation":
        return Orientation.DOWN if self is Orientation.ACROSS else Orientation.ACROSS

    @property
    def rank(self) -> int:
        return 0 if self is Orientation.ACROSS else 1


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
