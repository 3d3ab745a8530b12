"""Set-overlap similarity measures used by the grouping strategies."""
from __future__ import annotations

import math
from typing import AbstractSet, Optional

from dupcontent.text import ngrams, normalize


def jaccard(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Size of the intersection over size of the union; 0.0 if either set is empty."""
    if not a or not b:
        return 0.0
    inter = len(a & b)
    return inter / len(a | b)


def token_similarity(a: Optional[str], b: Optional[str]) -> float:
    return jaccard(normalize(a), normalize(b))


def ngram_similarity(a: Optional[str], b: Optional[str], n: int = 3) -> float:
    return jaccard(ngrams(a, n), ngrams(b, n))


def round_half_up(value: float) -> int:
    """Round to the nearest int with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def percent(ratio: float) -> int:
    """Convert a [0, 1] ratio to an integer percentage."""
    return round_half_up(ratio * 100)
