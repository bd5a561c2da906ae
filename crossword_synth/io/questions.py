"""Question sources feeding the synthesizer.

The synthesizer only needs a list of :class:`WordEntry`. In production the
list comes from the game server's question store; for local runs it can be
read from a JSON/CSV file, and when nothing is available a built-in set of
compiler-design questions is used.
"""

from __future__ import annotations

import csv
import json
import os
import random
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import requests

from ..core.exceptions import QuestionSourceError
from ..core.models import WordEntry
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

QUESTIONS_URL_ENV = "CROSSWORD_QUESTIONS_URL"

FALLBACK_QUESTIONS: List[Dict[str, Any]] = [
    {"id": 1, "question": "A program that translates source code into machine code", "answer": "COMPILER", "difficulty": "Easy"},
    {"id": 2, "question": "The first phase of compilation", "answer": "LEXICAL", "difficulty": "Easy"},
    {"id": 3, "question": "A sequence of characters with a collective meaning", "answer": "TOKEN", "difficulty": "Easy"},
    {"id": 4, "question": "Data structure used to store information about identifiers", "answer": "SYMBOLTABLE", "difficulty": "Medium"},
    {"id": 5, "question": "Phase that checks for grammatical errors", "answer": "SYNTAX", "difficulty": "Easy"},
    {"id": 6, "question": "Tree representation of the abstract syntactic structure", "answer": "AST", "difficulty": "Medium"},
    {"id": 7, "question": "A grammar that produces more than one parse tree for a string", "answer": "AMBIGUOUS", "difficulty": "Medium"},
    {"id": 8, "question": "Process of improving code efficiency without changing output", "answer": "OPTIMIZATION", "difficulty": "Medium"},
    {"id": 9, "question": "Bottom-up parsing is also called ____-reduce parsing", "answer": "SHIFT", "difficulty": "Hard"},
    {"id": 10, "question": "Tool used to generate lexical analyzers", "answer": "LEX", "difficulty": "Medium"},
    {"id": 11, "question": "Tool used to generate parsers", "answer": "YACC", "difficulty": "Medium"},
    {"id": 12, "question": "Type checking occurs during this analysis phase", "answer": "SEMANTIC", "difficulty": "Easy"},
    {"id": 13, "question": "Intermediate code often uses _____ address code", "answer": "THREE", "difficulty": "Hard"},
    {"id": 14, "question": "Converts assembly language to machine code", "answer": "ASSEMBLER", "difficulty": "Easy"},
    {"id": 15, "question": "Removing code that is never executed", "answer": "DEADCODE", "difficulty": "Medium"},
]


def fallback_questions() -> List[WordEntry]:
    return parse_question_rows(FALLBACK_QUESTIONS)


def parse_question_rows(rows: Iterable[Mapping[str, Any]]) -> List[WordEntry]:
    """Convert raw question rows into entries, skipping rows without a question or answer."""

    entries: List[WordEntry] = []
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, Mapping):
            LOGGER.warning("Row %s: expected an object, got %s", index, type(row).__name__)
            continue
        entry = WordEntry.from_mapping(row, default_id=index)
        if not entry.clue or not entry.raw_answer:
            LOGGER.warning("Row %s: missing question or answer", index)
            continue
        entries.append(entry)
    return entries


def load_questions_file(path: Path | str) -> List[WordEntry]:
    """Read questions from a ``.json`` file or a delimited file with a header row."""

    source = Path(path)
    if not source.exists():
        raise QuestionSourceError(f"Missing question file: {source}")

    try:
        text = source.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise QuestionSourceError(f"Cannot read {source}: {exc}") from exc

    if source.suffix.lower() == ".json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise QuestionSourceError(f"Invalid JSON in {source}: {exc}") from exc
        rows = _rows_from_payload(payload, str(source))
    else:
        delimiter = "\t" if source.suffix.lower() == ".tsv" else ","
        rows = list(csv.DictReader(text.splitlines(), delimiter=delimiter))

    entries = parse_question_rows(rows)
    LOGGER.info("Loaded %s questions from %s", len(entries), source)
    return entries


def _rows_from_payload(payload: Any, origin: str) -> List[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        raise QuestionSourceError(f"{origin} does not contain a question list")
    return payload


class HttpQuestionSource:
    """Fetch questions from the game server's ``/crossword/questions`` endpoint."""

    ENDPOINT = "/crossword/questions"

    def __init__(
        self,
        base_url: Optional[str] = None,
        url_env: str = QUESTIONS_URL_ENV,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.base_url = (base_url or os.environ.get(url_env) or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        if not self.base_url:
            raise QuestionSourceError(
                f"No question server configured; pass a base URL or set {url_env}"
            )

    def fetch(self) -> List[WordEntry]:
        url = f"{self.base_url}{self.ENDPOINT}"
        try:
            response = requests.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise QuestionSourceError(f"Question request failed: {exc}") from exc
        except ValueError as exc:
            raise QuestionSourceError(f"Question server returned invalid JSON: {exc}") from exc

        if isinstance(payload, Mapping) and payload.get("success") is False:
            raise QuestionSourceError("Question server reported failure")
        entries = parse_question_rows(_rows_from_payload(payload, url))
        LOGGER.info("Fetched %s questions from %s", len(entries), url)
        return entries


def sample_questions(entries: List[WordEntry], count: Optional[int], seed: Optional[int] = None) -> List[WordEntry]:
    """Pick ``count`` entries at random; the same seed always yields the same sample."""

    if count is None or count >= len(entries):
        return list(entries)
    return random.Random(seed).sample(entries, count)


def fetch_questions(
    loader: Optional[Callable[[], List[WordEntry]]],
    count: Optional[int] = None,
    seed: Optional[int] = None,
    use_fallback: bool = True,
) -> List[WordEntry]:
    """Load questions via ``loader`` and sample them, falling back to the built-in set."""

    entries: List[WordEntry] = []
    if loader is not None:
        try:
            entries = loader()
        except QuestionSourceError as exc:
            if not use_fallback:
                raise
            LOGGER.warning("Question source failed, using fallback questions: %s", exc)
    if not entries:
        if not use_fallback:
            raise QuestionSourceError("Question source returned no questions")
        if loader is not None:
            LOGGER.warning("No questions found, using fallback questions")
        entries = fallback_questions()
    return sample_questions(entries, count, seed)
