"""Grid representation, placement legality and helper queries."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from ..core.constants import DEFAULT_GRID_SIZE, ORTHOGONAL_STEPS, Bounds, Orientation
from ..core.exceptions import InvariantViolation
from ..core.models import Cell, PlacedWord, WordId
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

Coord = Tuple[int, int]


class CrosswordGrid:
    """Square letter grid owned by exactly one synthesis run."""

    def __init__(self, size: int = DEFAULT_GRID_SIZE) -> None:
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.bounds = Bounds(rows=size, cols=size)
        self.cells: List[List[Cell]] = [
            [Cell(row=r, col=c) for c in range(size)] for r in range(size)
        ]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def letter_at(self, row: int, col: int) -> Optional[str]:
        if not self.bounds.contains(row, col):
            return None
        return self.cells[row][col].letter

    def has_letter(self, row: int, col: int) -> bool:
        return self.letter_at(row, col) is not None

    @staticmethod
    def path(length: int, row: int, col: int, orientation: Orientation) -> List[Coord]:
        dr, dc = orientation.step
        return [(row + dr * i, col + dc * i) for i in range(length)]

    def neighbours(self, row: int, col: int) -> Iterable[Coord]:
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc):
                yield nr, nc

    def count_crossings(self, answer: str, row: int, col: int, orientation: Orientation) -> int:
        """Number of path cells that already hold a letter."""

        return sum(1 for r, c in self.path(len(answer), row, col, orientation) if self.has_letter(r, c))

    def filled_neighbours(self, answer: str, row: int, col: int, orientation: Orientation) -> int:
        """Distinct lettered cells orthogonally adjacent to the path, excluding the path itself."""

        path = set(self.path(len(answer), row, col, orientation))
        touched: Set[Coord] = set()
        for r, c in path:
            for nr, nc in self.neighbours(r, c):
                if (nr, nc) not in path and self.cells[nr][nc].has_letter():
                    touched.add((nr, nc))
        return len(touched)

    def letter_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.has_letter())

    def intersection_cells(self) -> List[Cell]:
        return [cell for row in self.cells for cell in row if cell.is_intersection()]

    def intersection_count(self) -> int:
        return len(self.intersection_cells())

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------
    def can_place(self, answer: str, row: int, col: int, orientation: Orientation) -> bool:
        """Return whether ``answer`` fits at ``(row, col)`` without breaking any rule.

        Checks run in order: span bounds, per-letter compatibility, boundary
        isolation at both ends, then perpendicular adjacency. The adjacency
        rule is the strict one: a cell the word newly fills must have no
        lettered neighbour on either perpendicular side, so two parallel
        words never sit side by side without a real crossing.
        """

        length = len(answer)
        if length == 0:
            return False
        dr, dc = orientation.step
        end_row = row + dr * (length - 1)
        end_col = col + dc * (length - 1)
        if not (self.bounds.contains(row, col) and self.bounds.contains(end_row, end_col)):
            return False

        path = self.path(length, row, col, orientation)
        fresh: List[Coord] = []
        for index, (r, c) in enumerate(path):
            cell = self.cells[r][c]
            if cell.blocked:
                return False
            if cell.letter is None:
                fresh.append((r, c))
                continue
            if cell.letter != answer[index]:
                return False
            if cell.owner(orientation) is not None:
                return False

        if self.has_letter(row - dr, col - dc) or self.has_letter(end_row + dr, end_col + dc):
            return False

        pr, pc = orientation.perpendicular.step
        for r, c in fresh:
            if self.has_letter(r + pr, c + pc) or self.has_letter(r - pr, c - pc):
                return False
        return True

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place_word(
        self,
        word_id: WordId,
        answer: str,
        row: int,
        col: int,
        orientation: Orientation,
    ) -> List[Coord]:
        """Write ``answer`` onto the grid and return the cells it newly filled."""

        if not self.can_place(answer, row, col, orientation):
            raise InvariantViolation(
                f"Refusing illegal placement of {answer!r} at ({row},{col}) {orientation.value}"
            )

        filled: List[Coord] = []
        for index, (r, c) in enumerate(self.path(len(answer), row, col, orientation)):
            cell = self.cells[r][c]
            if cell.letter is None:
                cell.letter = answer[index]
                filled.append((r, c))
            elif cell.letter != answer[index]:
                raise InvariantViolation(f"Letter conflict at ({r},{c})")
            cell.set_owner(orientation, word_id)
        LOGGER.debug("Placed %s at (%s,%s) %s", answer, row, col, orientation.value)
        return filled

    def remove_word(self, word: PlacedWord) -> None:
        """Release a placed word's cells; cells still owned by a crossing word keep their letter."""

        for r, c in word.cells:
            cell = self.cells[r][c]
            if cell.owner(word.orientation) != word.id:
                raise InvariantViolation(f"Cell ({r},{c}) is not owned by word {word.id}")
            cell.set_owner(word.orientation, None)
            if cell.across_owner is None and cell.down_owner is None:
                cell.letter = None

    def block_empty_cells(self) -> int:
        """Turn every letterless cell into a blocked cell and return how many there are."""

        blocked = 0
        for row in self.cells:
            for cell in row:
                if cell.letter is None:
                    cell.blocked = True
                    blocked += 1
        return blocked

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> List[List[dict]]:
        return [[cell.to_jsonable() for cell in row] for row in self.cells]
