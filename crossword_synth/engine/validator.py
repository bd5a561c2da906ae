"""Deterministic rule validation for synthesized grids."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.constants import Orientation
from ..core.exceptions import InvariantViolation
from ..core.models import PlacedWord
from ..utils.logger import get_logger
from .grid import CrosswordGrid


LOGGER = get_logger(__name__)

Coord = Tuple[int, int]


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str] = field(default_factory=list)


class GridValidator:
    """Runs deterministic validation over a finished grid."""

    def validate(
        self,
        grid: CrosswordGrid,
        words: Sequence[PlacedWord],
        density: Optional[float] = None,
    ) -> ValidationResult:
        try:
            self._check_cells(grid)
            occupancy = self._check_words_on_grid(grid, words)
            self._check_intersections(grid, occupancy)
            self._check_boundaries(grid, words)
            self._check_numbering(grid, words)
            if density is not None:
                self._check_density(density, words)
        except InvariantViolation as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True)

    def assert_valid(
        self,
        grid: CrosswordGrid,
        words: Sequence[PlacedWord],
        density: Optional[float] = None,
    ) -> None:
        result = self.validate(grid, words, density)
        if not result.ok:
            raise InvariantViolation("; ".join(result.messages))

    def _check_cells(self, grid: CrosswordGrid) -> None:
        for row in grid.cells:
            for cell in row:
                if cell.letter is None:
                    continue
                if cell.blocked:
                    raise InvariantViolation(f"Blocked cell at ({cell.row},{cell.col}) holds a letter")
                if len(cell.letter) != 1 or not ("A" <= cell.letter <= "Z"):
                    raise InvariantViolation(f"Invalid letter '{cell.letter}' at ({cell.row},{cell.col})")

    def _check_words_on_grid(
        self, grid: CrosswordGrid, words: Sequence[PlacedWord]
    ) -> Dict[Orientation, Dict[Coord, Tuple[PlacedWord, int]]]:
        occupancy: Dict[Orientation, Dict[Coord, Tuple[PlacedWord, int]]] = {
            Orientation.ACROSS: {},
            Orientation.DOWN: {},
        }
        for word in words:
            taken = occupancy[word.orientation]
            for index, (r, c) in enumerate(word.cells):
                if not grid.bounds.contains(r, c):
                    raise InvariantViolation(f"Word {word.answer} leaves the grid at ({r},{c})")
                if (r, c) in taken:
                    other = taken[(r, c)][0]
                    raise InvariantViolation(
                        f"Words {other.answer} and {word.answer} overlap {word.orientation.value} at ({r},{c})"
                    )
                cell = grid.cell(r, c)
                if cell.letter != word.answer[index]:
                    raise InvariantViolation(
                        f"Cell ({r},{c}) holds {cell.letter!r}, expected {word.answer[index]!r} from {word.answer}"
                    )
                if cell.owner(word.orientation) != word.id:
                    raise InvariantViolation(f"Cell ({r},{c}) is not owned by word {word.id}")
                taken[(r, c)] = (word, index)
        return occupancy

    def _check_intersections(
        self,
        grid: CrosswordGrid,
        occupancy: Dict[Orientation, Dict[Coord, Tuple[PlacedWord, int]]],
    ) -> None:
        for cell in grid.intersection_cells():
            coord = (cell.row, cell.col)
            across = occupancy[Orientation.ACROSS].get(coord)
            down = occupancy[Orientation.DOWN].get(coord)
            if across is None or down is None:
                raise InvariantViolation(f"Intersection at {coord} has an unknown owner")
            across_letter = across[0].answer[across[1]]
            down_letter = down[0].answer[down[1]]
            if not (across_letter == down_letter == cell.letter):
                raise InvariantViolation(
                    f"Intersection at {coord} mismatches: {across_letter} vs {down_letter}"
                )

    def _check_boundaries(self, grid: CrosswordGrid, words: Sequence[PlacedWord]) -> None:
        for word in words:
            dr, dc = word.orientation.step
            end_row, end_col = word.end
            for r, c in ((word.start_row - dr, word.start_col - dc), (end_row + dr, end_col + dc)):
                if grid.has_letter(r, c):
                    raise InvariantViolation(
                        f"Word {word.answer} runs into a letter at ({r},{c})"
                    )

    def _check_numbering(self, grid: CrosswordGrid, words: Sequence[PlacedWord]) -> None:
        starts = sorted({(word.start_row, word.start_col) for word in words})
        expected = {coord: number for number, coord in enumerate(starts, start=1)}
        for word in words:
            number = expected[(word.start_row, word.start_col)]
            if word.clue_number is not None and word.clue_number != number:
                raise InvariantViolation(
                    f"Word {word.answer} numbered {word.clue_number}, expected {number}"
                )
        for row in grid.cells:
            for cell in row:
                if cell.number is None:
                    continue
                if expected.get((cell.row, cell.col)) != cell.number:
                    raise InvariantViolation(f"Unexpected clue number {cell.number} at ({cell.row},{cell.col})")

    @staticmethod
    def _check_density(density: float, words: Sequence[PlacedWord]) -> None:
        if not 0.0 <= density <= 100.0:
            raise InvariantViolation(f"Density {density} outside [0, 100]")
        if (density == 0.0) != (len(words) == 0):
            raise InvariantViolation("Density must be zero exactly when no words are placed")
