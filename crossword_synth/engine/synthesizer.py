"""Crossword grid synthesis orchestration.

One run places a list of question answers on a square grid:

  1. Seed: the longest answer goes across the middle row.
  2. Tiers, per remaining answer: crossing search against placed words,
     then a full scan of every position, then attachment beyond the ends of
     placed words. An answer that fails all three is reported as unplaced.
  3. Repair: words that ended up crossing nothing are lifted and re-tried
     against the rest of the grid.
  4. Finalize: empty cells become blocked, start cells are numbered in
     reading order and the statistics are computed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.constants import DEFAULT_GRID_SIZE, MIN_ANSWER_LENGTH, Orientation
from ..core.exceptions import InputError, InvariantViolation
from ..core.models import PlacedWord, SynthesisResult, WordEntry
from ..utils.logger import get_logger
from .grid import CrosswordGrid
from .scoring import Candidate, ScoringWeights, best_candidate, placement_score
from .validator import GridValidator


LOGGER = get_logger(__name__)

Position = Tuple[int, int, Orientation]
WordInput = Union[WordEntry, Mapping[str, Any]]


@dataclass
class SynthesizerConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    # Full-grid scan is the expensive tier; callers on a time budget may turn it off.
    exhaustive_scan: bool = True
    boundary_attachment: bool = True
    repair_isolated: bool = True
    validate: bool = True


class GridSynthesizer:
    """Places word entries on a grid. Each instance performs a single run."""

    def __init__(self, config: Optional[SynthesizerConfig] = None) -> None:
        self.config = config or SynthesizerConfig()
        if self.config.grid_size < MIN_ANSWER_LENGTH:
            raise InputError(
                f"Grid size must be at least {MIN_ANSWER_LENGTH}, got {self.config.grid_size}"
            )
        self.grid = CrosswordGrid(self.config.grid_size)
        self.validator = GridValidator()
        self.placed: List[PlacedWord] = []
        self.unplaced: List[str] = []
        self.pending: List[WordEntry] = []
        self.total_entries = 0
        self._started = False

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def synthesize(self, words: Sequence[WordInput]) -> SynthesisResult:
        self.initialize(words)
        for entry in self.pending:
            self.place_entry(entry)
        if self.config.repair_isolated:
            self.repair_isolated_words()
        return self.number_and_finalize()

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------
    def initialize(self, words: Sequence[WordInput]) -> None:
        """Filter and order the input, then seed the grid with the longest answer."""

        if self._started:
            raise RuntimeError("GridSynthesizer instances are single-use; create a new one per run")
        self._started = True

        entries = [self._as_entry(word, index) for index, word in enumerate(words, start=1)]
        if not entries:
            raise InputError("No words supplied")
        self.total_entries = len(entries)

        size = self.config.grid_size
        usable: List[WordEntry] = []
        for entry in entries:
            if MIN_ANSWER_LENGTH <= entry.length <= size:
                usable.append(entry)
            else:
                LOGGER.warning(
                    "Dropping %r: length %s outside [%s, %s]",
                    entry.display_answer,
                    entry.length,
                    MIN_ANSWER_LENGTH,
                    size,
                )
                self.unplaced.append(entry.display_answer)
        if not usable:
            raise InputError(
                f"None of the {len(entries)} answers fits a {size}x{size} grid "
                f"(lengths must be between {MIN_ANSWER_LENGTH} and {size})"
            )

        ordered = sorted(usable, key=lambda entry: (-entry.length, entry.answer))
        seed = ordered[0]
        row = size // 2
        col = max(0, (size - seed.length) // 2)
        self._commit(seed, Candidate(row, col, Orientation.ACROSS))
        self.pending = ordered[1:]
        LOGGER.info(
            "Seeded %s at (%s,%s); %s words queued for a %sx%s grid",
            seed.answer,
            row,
            col,
            len(self.pending),
            size,
            size,
        )

    @staticmethod
    def _as_entry(word: WordInput, index: int) -> WordEntry:
        if isinstance(word, WordEntry):
            return word
        return WordEntry.from_mapping(word, default_id=index)

    # ------------------------------------------------------------------
    # Placement tiers
    # ------------------------------------------------------------------
    def place_entry(self, entry: WordEntry) -> bool:
        if self.try_intersection_placement(entry):
            return True
        if self.config.exhaustive_scan and self.try_exhaustive_placement(entry):
            return True
        if self.config.boundary_attachment and self.try_boundary_attachment(entry):
            return True
        LOGGER.debug("No tier could place %s", entry.answer)
        self.unplaced.append(entry.answer)
        return False

    def try_intersection_placement(self, entry: WordEntry) -> bool:
        """Cross a placed word through a shared letter, choosing the best-scoring position."""

        positions: List[Position] = []
        for placed in self.placed:
            orientation = placed.orientation.perpendicular
            for i, letter in enumerate(entry.answer):
                for j, placed_letter in enumerate(placed.answer):
                    if letter != placed_letter:
                        continue
                    if placed.orientation is Orientation.ACROSS:
                        positions.append((placed.start_row - i, placed.start_col + j, orientation))
                    else:
                        positions.append((placed.start_row + j, placed.start_col - i, orientation))
        return self._place_best(entry, positions, tier="intersection")

    def try_exhaustive_placement(self, entry: WordEntry) -> bool:
        """Consider every cell in both orientations; a crossing is not required."""

        size = self.config.grid_size
        positions = [
            (row, col, orientation)
            for row in range(size)
            for col in range(size)
            for orientation in Orientation
        ]
        return self._place_best(entry, positions, tier="exhaustive")

    def try_boundary_attachment(self, entry: WordEntry) -> bool:
        """Line the word up with a placed word, just past one of its ends.

        One empty cell is left between the two words so neither reads as an
        extension of the other. The first legal slot in placement order wins.
        """

        length = entry.length
        for placed in self.placed:
            dr, dc = placed.orientation.step
            end_row, end_col = placed.end
            slots = (
                (placed.start_row - dr * (length + 1), placed.start_col - dc * (length + 1)),
                (end_row + dr * 2, end_col + dc * 2),
            )
            for row, col in slots:
                if self.grid.can_place(entry.answer, row, col, placed.orientation):
                    self._commit(entry, Candidate(row, col, placed.orientation))
                    LOGGER.debug("Attached %s beyond %s", entry.answer, placed.answer)
                    return True
        return False

    def _place_best(self, entry: WordEntry, positions: Iterable[Position], tier: str) -> bool:
        candidates = [
            Candidate(
                row,
                col,
                orientation,
                placement_score(self.grid, entry.answer, row, col, orientation, self.config.weights),
            )
            for row, col, orientation in dict.fromkeys(positions)
            if self.grid.can_place(entry.answer, row, col, orientation)
        ]
        best = best_candidate(candidates)
        if best is None:
            return False
        self._commit(entry, best)
        LOGGER.debug(
            "Placed %s via %s tier at (%s,%s) %s, score %.1f of %s candidates",
            entry.answer,
            tier,
            best.row,
            best.col,
            best.orientation.value,
            best.score,
            len(candidates),
        )
        return True

    def _commit(self, entry: WordEntry, candidate: Candidate) -> PlacedWord:
        self.grid.place_word(entry.id, entry.answer, candidate.row, candidate.col, candidate.orientation)
        placed = PlacedWord(
            id=entry.id,
            answer=entry.answer,
            start_row=candidate.row,
            start_col=candidate.col,
            orientation=candidate.orientation,
            clue=entry.clue,
            difficulty=entry.difficulty,
        )
        self.placed.append(placed)
        return placed

    # ------------------------------------------------------------------
    # Connectivity repair
    # ------------------------------------------------------------------
    def is_isolated(self, word: PlacedWord) -> bool:
        return not any(self.grid.cell(r, c).is_intersection() for r, c in word.cells)

    def repair_isolated_words(self) -> int:
        """Try to give every crossing-free word a crossing. Returns how many were bridged.

        An isolated word owns all of its cells, so lifting it leaves the rest
        of the grid untouched. It is then offered to the crossing tier; when
        no crossing position exists it goes back exactly where it was.
        """

        bridged = 0
        for word in list(self.placed):
            if len(self.placed) < 2 or not self.is_isolated(word):
                continue
            index = self.placed.index(word)
            self.grid.remove_word(word)
            del self.placed[index]

            entry = WordEntry(id=word.id, clue=word.clue, answer=word.answer, difficulty=word.difficulty)
            if self.try_intersection_placement(entry):
                self.placed.insert(index, self.placed.pop())
                bridged += 1
                LOGGER.debug("Bridged isolated word %s", word.answer)
            else:
                self.grid.place_word(word.id, word.answer, word.start_row, word.start_col, word.orientation)
                self.placed.insert(index, word)

        still_isolated = sum(1 for word in self.placed if self.is_isolated(word)) if len(self.placed) > 1 else 0
        if bridged or still_isolated:
            LOGGER.info("Repair bridged %s word(s); %s remain isolated", bridged, still_isolated)
        return bridged

    # ------------------------------------------------------------------
    # Numbering & statistics
    # ------------------------------------------------------------------
    def number_and_finalize(self) -> SynthesisResult:
        grid = self.grid
        grid.block_empty_cells()

        starts = {(word.start_row, word.start_col) for word in self.placed}
        number = 0
        for row in grid.cells:
            for cell in row:
                if (cell.row, cell.col) in starts:
                    number += 1
                    cell.number = number

        numbered = [
            replace(word, clue_number=grid.cell(word.start_row, word.start_col).number)
            for word in self.placed
        ]
        numbered.sort(key=lambda word: (word.clue_number, word.orientation.rank))

        total_cells = grid.size * grid.size
        density = grid.letter_count() / total_cells * 100
        intersections = grid.intersection_count()

        messages: List[str] = []
        if self.config.validate:
            validation = self.validator.validate(grid, numbered, density)
            if not validation.ok:
                raise InvariantViolation(f"Grid validation failed: {validation.messages}")
            messages = validation.messages

        if len(numbered) + len(self.unplaced) != self.total_entries:
            raise InvariantViolation(
                f"Lost track of words: {len(numbered)} placed + {len(self.unplaced)} unplaced "
                f"!= {self.total_entries} supplied"
            )

        LOGGER.info(
            "Placed %s/%s words, %s intersections, density %.1f%%",
            len(numbered),
            self.total_entries,
            intersections,
            density,
        )
        if self.unplaced:
            LOGGER.warning(
                "%s clue(s) could not be placed on a %sx%s grid; consider fewer or shorter words: %s",
                len(self.unplaced),
                grid.size,
                grid.size,
                ", ".join(self.unplaced),
            )

        return SynthesisResult(
            grid=grid,
            placed_words=tuple(numbered),
            unplaced_words=tuple(self.unplaced),
            grid_size=grid.size,
            density=density,
            intersection_count=intersections,
            validation_messages=tuple(messages),
        )


def synthesize_crossword(
    words: Sequence[WordInput],
    grid_size: int = DEFAULT_GRID_SIZE,
    **options: Any,
) -> SynthesisResult:
    """Run a full synthesis with a fresh :class:`GridSynthesizer`."""

    config = SynthesizerConfig(grid_size=grid_size, **options)
    return GridSynthesizer(config).synthesize(words)


def unplaced_summary(result: SynthesisResult) -> Optional[str]:
    """Operator-facing warning for answers that did not fit, or ``None``."""

    if not result.unplaced_words:
        return None
    count = len(result.unplaced_words)
    size = result.grid_size
    return (
        f"{count} clue{'s' if count != 1 else ''} could not be placed on a {size}x{size} grid; "
        "consider fewer or shorter words"
    )


__all__: List[str] = [
    "GridSynthesizer",
    "SynthesizerConfig",
    "synthesize_crossword",
    "unplaced_summary",
]
