"""Text normalization: word tokens and character n-grams."""
from __future__ import annotations

import re
from typing import FrozenSet, Optional

_RE_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_RE_WS = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 3


def clean_text(text: Optional[str]) -> str:
    """Lowercase and drop every character outside ``[a-z0-9\\s]``."""
    if not text:
        return ""
    return _RE_NON_ALNUM.sub("", text.lower())


def normalize(text: Optional[str]) -> FrozenSet[str]:
    """Return the set of significant word tokens in ``text``.

    Tokens shorter than three characters are dropped.
    """
    cleaned = clean_text(text)
    return frozenset(t for t in _RE_WS.split(cleaned) if len(t) >= MIN_TOKEN_LENGTH)


def ngrams(text: Optional[str], n: int = 3) -> FrozenSet[str]:
    """Return every length-``n`` character window of the cleaned text.

    Whitespace is kept as a character and no padding is added, so input
    shorter than ``n`` yields an empty set.
    """
    if n < 1:
        raise ValueError("n must be >= 1")
    cleaned = clean_text(text)
    return frozenset(cleaned[i:i + n] for i in range(len(cleaned) - n + 1))


def exact_key(text: Optional[str]) -> str:
    """Key used to bucket byte-identical descriptions."""
    return (text or "").lower().strip()
