"""Custom exception hierarchy for crossword synthesis."""


class CrosswordError(Exception):
    """Base exception for synthesis failures."""


class InputError(CrosswordError):
    """Raised when the word list is empty or nothing in it can be placed."""


class InvariantViolation(CrosswordError):
    """Raised when the grid would end up in a state the placement rules forbid."""


class QuestionSourceError(CrosswordError):
    """Raised when questions cannot be loaded from a file or remote source."""
