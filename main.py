"""CLI entrypoint for the crossword grid synthesizer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional

from crossword_synth.core.constants import DEFAULT_GRID_SIZE
from crossword_synth.core.exceptions import CrosswordError
from crossword_synth.core.models import WordEntry
from crossword_synth.engine.synthesizer import GridSynthesizer, SynthesizerConfig
from crossword_synth.io.questions import HttpQuestionSource, fetch_questions, load_questions_file
from crossword_synth.utils.logger import configure_logging, get_logger
from crossword_synth.utils.pretty import print_synthesis_stats


LOGGER = get_logger("crossword_synth.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Synthesize a crossword grid from question/answer pairs",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--questions",
        type=Path,
        metavar="FILE",
        help="JSON, CSV or TSV file with question/answer/difficulty columns",
    )
    source.add_argument(
        "--questions-url",
        type=str,
        metavar="URL",
        help="Base URL of a game server exposing /crossword/questions "
        "(defaults to $CROSSWORD_QUESTIONS_URL when --remote is set)",
    )
    source.add_argument(
        "--remote",
        action="store_true",
        help="Fetch questions from the server named by $CROSSWORD_QUESTIONS_URL",
    )
    parser.add_argument("--count", type=int, default=None, help="Number of questions to sample")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for question sampling")
    parser.add_argument("--grid-size", type=int, default=DEFAULT_GRID_SIZE, help="Grid edge length in cells")
    parser.add_argument(
        "--no-exhaustive",
        action="store_true",
        help="Skip the full-grid scan tier (faster, may leave more words unplaced)",
    )
    parser.add_argument("--no-repair", action="store_true", help="Skip isolated-word repair")
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Fail instead of using the built-in questions when the source is empty or unavailable",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--print", dest="show", action="store_true", help="Print the grid, clues and stats")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def build_loader(args: argparse.Namespace) -> Optional[Callable[[], List[WordEntry]]]:
    if args.questions:
        return partial(load_questions_file, args.questions)
    if args.questions_url or args.remote:
        return lambda: HttpQuestionSource(args.questions_url).fetch()
    return None


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.count is not None and args.count < 1:
        parser.error("--count must be positive")
    if args.grid_size < 2:
        parser.error("--grid-size must be at least 2")

    config = SynthesizerConfig(
        grid_size=args.grid_size,
        exhaustive_scan=not args.no_exhaustive,
        repair_isolated=not args.no_repair,
    )

    try:
        entries = fetch_questions(
            build_loader(args),
            count=args.count,
            seed=args.seed,
            use_fallback=not args.no_fallback,
        )
        result = GridSynthesizer(config).synthesize(entries)
    except CrosswordError as exc:
        LOGGER.error("Synthesis failed: %s", exc)
        return 1

    if args.show:
        print_synthesis_stats(result)

    output_text = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
        LOGGER.info("Crossword written to %s", args.output)
    elif not args.show:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
