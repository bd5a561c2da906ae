"""Pretty-print helpers for synthesized crosswords."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, List, Union

from ..core.constants import Orientation
from ..engine.synthesizer import unplaced_summary

if TYPE_CHECKING:
    from ..core.models import Cell, PlacedWord, SynthesisResult
    from ..engine.grid import CrosswordGrid


BLOCKED = "#"
OPEN = "."


def cell_symbol(cell: "Cell", solution: bool = True) -> str:
    if cell.letter is None:
        return BLOCKED if cell.blocked else OPEN
    if solution:
        return cell.letter
    return str(cell.number) if cell.number is not None else OPEN


def format_grid(source: Union["SynthesisResult", "CrosswordGrid"], solution: bool = True) -> str:
    """Render the grid with a column header; ``solution=False`` shows clue numbers instead of letters."""

    grid = getattr(source, "grid", source)
    width = grid.size
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(width):
        row_cells = [cell_symbol(grid.cell(r, c), solution) for c in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_clues(result: "SynthesisResult") -> str:
    lines: List[str] = []
    for title, words in (("ACROSS", result.across), ("DOWN", result.down)):
        lines.append(f"{title}:")
        for word in words:
            lines.append(f"  {word.clue_number}. {word.clue} ({word.length} letters)")
    return "\n".join(lines)


def crossing_words(result: "SynthesisResult", word: "PlacedWord") -> List[str]:
    crossings: List[str] = []
    for r, c in word.cells:
        cell = result.grid.cell(r, c)
        if not cell.is_intersection():
            continue
        other_id = cell.owner(word.orientation.perpendicular)
        other = next(
            (
                candidate
                for candidate in result.placed_words
                if candidate.id == other_id
                and candidate.orientation is word.orientation.perpendicular
                and (r, c) in candidate.cells
            ),
            None,
        )
        if other is not None:
            crossings.append(other.answer)
    return crossings


def format_connections(result: "SynthesisResult") -> str:
    lines: List[str] = []
    for orientation in Orientation:
        lines.append(f"{orientation.value.upper()} WORDS:")
        words = result.across if orientation is Orientation.ACROSS else result.down
        for index, word in enumerate(words, start=1):
            crossings = ", ".join(crossing_words(result, word)) or "None"
            lines.append(
                f"  {index}. {word.answer:<12} at ({word.start_row},{word.start_col}) -> crosses: {crossings}"
            )
    return "\n".join(lines)


def print_synthesis_stats(result: "SynthesisResult", *, stream=None) -> None:
    """Print grid, clue lists and statistics for a finished synthesis."""

    stream = stream or sys.stdout
    print(format_grid(result), file=stream)
    print(file=stream)
    print(format_grid(result, solution=False), file=stream)

    total_cells = result.grid_size * result.grid_size
    letter_cells = result.grid.letter_count()
    lengths = [word.length for word in result.placed_words]
    length_dist = Counter(lengths)

    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {result.grid_size} x {result.grid_size} ({total_cells} cells)", file=stream)
    print(f"  Letters:       {letter_cells} ({result.density:.1f}%)", file=stream)
    print(f"  Intersections: {result.intersection_count}", file=stream)

    print(file=stream)
    print("--- Words ---", file=stream)
    print(f"  Placed:        {result.placed_count} ({len(result.across)} across, {len(result.down)} down)", file=stream)
    if lengths:
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        dist_parts = [f"{length}:{count}" for length, count in sorted(length_dist.items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
    if result.placed_count:
        print(
            f"  Avg crossings: {result.intersection_count * 2 / result.placed_count:.1f} per word",
            file=stream,
        )

    print(file=stream)
    print(format_clues(result), file=stream)
    print(file=stream)
    print(format_connections(result), file=stream)

    if result.unplaced_words:
        print(file=stream)
        print("--- Unplaced ---", file=stream)
        print(f"  {unplaced_summary(result)}", file=stream)
        for answer in result.unplaced_words:
            print(f"  {answer}", file=stream)
