"""Placement heuristics used to rank legal candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..core.constants import Orientation
from .grid import CrosswordGrid


@dataclass(frozen=True)
class ScoringWeights:
    centrality: float = 2.0
    intersection: float = 50.0
    density: float = 20.0


@dataclass(frozen=True)
class Candidate:
    row: int
    col: int
    orientation: Orientation
    score: float = 0.0

    def sort_key(self) -> Tuple[float, int, int, int]:
        return (-self.score, self.row, self.col, self.orientation.rank)


def placement_score(
    grid: CrosswordGrid,
    answer: str,
    row: int,
    col: int,
    orientation: Orientation,
    weights: ScoringWeights = ScoringWeights(),
) -> float:
    """Rank a legal placement. Never decides legality.

    The score adds three parts: closeness of the word's midpoint to the
    grid centre (Manhattan distance, inverted), a flat bonus when at least
    one letter is shared with a placed word, and the number of lettered
    cells bordering the path.
    """

    center = grid.size / 2
    dr, dc = orientation.step
    half = (len(answer) - 1) / 2
    mid_row = row + dr * half
    mid_col = col + dc * half
    distance = abs(mid_row - center) + abs(mid_col - center)
    score = (grid.size - distance) * weights.centrality

    if grid.count_crossings(answer, row, col, orientation) > 0:
        score += weights.intersection

    score += grid.filled_neighbours(answer, row, col, orientation) * weights.density
    return score


def best_candidate(candidates: Iterable[Candidate]) -> Optional[Candidate]:
    """Highest score wins; ties go to lowest row, then lowest column, then ACROSS."""

    return min(candidates, key=Candidate.sort_key, default=None)
