"""Answer normalization shared by input parsing and answer checks."""

from __future__ import annotations

import re
import unicodedata
from typing import Optional

WORD_RE = re.compile(r"[^A-Z]")


def normalize_answer(text: Optional[str]) -> str:
    """Return ``text`` as uppercase ASCII letters only.

    Accented letters are folded to their base letter before filtering, so
    ``"Café au lait"`` becomes ``"CAFEAULAIT"``.
    """

    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(text))
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return WORD_RE.sub("", stripped.upper())


__all__ = ["normalize_answer"]
