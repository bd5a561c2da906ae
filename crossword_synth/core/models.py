"""Data models supporting grid synthesis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from ..data.normalization import normalize_answer
from .constants import Difficulty, Orientation

if TYPE_CHECKING:
    from ..engine.grid import CrosswordGrid


WordId = Union[int, str]


@dataclass(frozen=True)
class WordEntry:
    """One question/answer pair as read from the question source."""

    id: WordId
    clue: str
    answer: str
    difficulty: Difficulty = Difficulty.MEDIUM
    raw_answer: str = field(default="", compare=False)

    @classmethod
    def create(
        cls,
        id: WordId,
        clue: str,
        answer: str,
        difficulty: Optional[str] = None,
    ) -> "WordEntry":
        return cls(
            id=id,
            clue=(clue or "").strip(),
            answer=normalize_answer(answer),
            difficulty=Difficulty.parse(difficulty),
            raw_answer=(answer or "").strip(),
        )

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], default_id: Optional[WordId] = None) -> "WordEntry":
        """Build an entry from a question row (``id``, ``question``, ``answer``, ``difficulty``)."""

        clue = row.get("question") or row.get("Question") or row.get("clue") or ""
        answer = row.get("answer") or row.get("Answer") or ""
        difficulty = row.get("difficulty") or row.get("Difficulty")
        word_id = row.get("id")
        if word_id is None or word_id == "":
            word_id = default_id
        return cls.create(word_id, str(clue), str(answer), difficulty)

    @property
    def length(self) -> int:
        return len(self.answer)

    @property
    def display_answer(self) -> str:
        return self.answer or self.raw_answer


@dataclass
class Cell:
    """Represents a grid cell with ownership metadata."""

    row: int
    col: int
    letter: Optional[str] = None
    blocked: bool = False
    across_owner: Optional[WordId] = None
    down_owner: Optional[WordId] = None
    number: Optional[int] = None

    def has_letter(self) -> bool:
        return self.letter is not None

    def is_empty(self) -> bool:
        return self.letter is None and not self.blocked

    def is_intersection(self) -> bool:
        return self.across_owner is not None and self.down_owner is not None

    def owner(self, orientation: Orientation) -> Optional[WordId]:
        if orientation is Orientation.ACROSS:
            return self.across_owner
        return self.down_owner

    def set_owner(self, orientation: Orientation, word_id: Optional[WordId]) -> None:
        if orientation is Orientation.ACROSS:
            self.across_owner = word_id
        else:
            self.down_owner = word_id

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "letter": self.letter or "",
            "blocked": self.blocked,
            "number": self.number,
            "acrossOwner": self.across_owner,
            "downOwner": self.down_owner,
        }


@dataclass(frozen=True)
class PlacedWord:
    """A word that made it onto the grid."""

    id: WordId
    answer: str
    start_row: int
    start_col: int
    orientation: Orientation
    clue: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    clue_number: Optional[int] = None

    @property
    def length(self) -> int:
        return len(self.answer)

    @property
    def cells(self) -> List[Tuple[int, int]]:
        dr, dc = self.orientation.step
        return [(self.start_row + dr * i, self.start_col + dc * i) for i in range(self.length)]

    @property
    def end(self) -> Tuple[int, int]:
        return self.cells[-1]

    def matches(self, submission: Optional[str]) -> bool:
        """Case-insensitive exact comparison of a player's submission."""

        return bool(submission) and normalize_answer(submission) == self.answer

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "number": self.clue_number,
            "clueNumber": self.clue_number,
            "clue": self.clue,
            "answer": self.answer,
            "length": self.length,
            "direction": self.orientation.value,
            "orientation": self.orientation.value,
            "startRow": self.start_row,
            "startCol": self.start_col,
            "difficulty": self.difficulty.value,
        }


@dataclass(frozen=True)
class SynthesisResult:
    """Immutable outcome of a single synthesis run."""

    grid: "CrosswordGrid"
    placed_words: Tuple[PlacedWord, ...]
    unplaced_words: Tuple[str, ...]
    grid_size: int
    density: float
    intersection_count: int
    validation_messages: Tuple[str, ...] = ()

    @property
    def placed_count(self) -> int:
        return len(self.placed_words)

    @property
    def across(self) -> List[PlacedWord]:
        return [word for word in self.placed_words if word.orientation is Orientation.ACROSS]

    @property
    def down(self) -> List[PlacedWord]:
        return [word for word in self.placed_words if word.orientation is Orientation.DOWN]

    def find(self, word_id: WordId) -> Optional[PlacedWord]:
        for word in self.placed_words:
            if word.id == word_id:
                return word
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.to_jsonable(),
            "placedWords": [word.to_jsonable() for word in self.placed_words],
            "clues": {
                "across": [word.to_jsonable() for word in self.across],
                "down": [word.to_jsonable() for word in self.down],
            },
            "unplacedWords": list(self.unplaced_words),
            "placedCount": self.placed_count,
            "gridSize": self.grid_size,
            "density": self.density,
            "intersectionCount": self.intersection_count,
        }
