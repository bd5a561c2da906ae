"""Crossword grid synthesis from question/answer lists.

This package exposes the public API surface via:

- ``crossword_synth.engine.synthesizer.GridSynthesizer``: places answers on a grid.
- ``crossword_synth.engine.synthesizer.synthesize_crossword``: one-call convenience wrapper.
- ``crossword_synth.io.questions`` helpers: load question lists from files or a server.
"""

from .core.constants import Difficulty, Orientation
from .core.exceptions import CrosswordError, InputError, InvariantViolation, QuestionSourceError
from .core.models import Cell, PlacedWord, SynthesisResult, WordEntry
from .engine.synthesizer import GridSynthesizer, SynthesizerConfig, synthesize_crossword

__all__ = [
    "Cell",
    "CrosswordError",
    "Difficulty",
    "GridSynthesizer",
    "InputError",
    "InvariantViolation",
    "Orientation",
    "PlacedWord",
    "QuestionSourceError",
    "SynthesisResult",
    "SynthesizerConfig",
    "WordEntry",
    "synthesize_crossword",
]

__version__ = "0.1.0"
