"""Per-call analysis state shared by the grouping strategies.

Everything here is built fresh for one ``analyze()`` call and discarded with
the report. Products are addressed by their catalog position; derived text and
claim marks live in lists indexed the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from dupcontent.config import EngineConfig
from dupcontent.models import ProductRecord
from dupcontent.text import ngrams, normalize


@dataclass(frozen=True)
class NormalizedText:
    token_set: FrozenSet[str]
    ngram_set: FrozenSet[str]


class ClaimRegistry:
    """Boolean marks for products already placed in an Exact or Similar group."""

    def __init__(self, size: int):
        self._claimed: List[bool] = [False] * size

    def __len__(self) -> int:
        return len(self._claimed)

    def is_claimed(self, index: int) -> bool:
        return self._claimed[index]

    def claim(self, index: int) -> None:
        self._claimed[index] = True

    def claim_all(self, indices: Iterable[int]) -> None:
        for index in indices:
            self._claimed[index] = True

    @property
    def claimed_count(self) -> int:
        return sum(self._claimed)


def has_text(description: str) -> bool:
    return bool(description) and bool(description.strip())


def is_eligible(description: str, min_length: int) -> bool:
    """Whether a description is long enough for exact/similar comparison."""
    return has_text(description) and len(description) >= min_length


@dataclass
class AnalysisContext:
    """Catalog arena for one analysis run.

    Attributes:
        products: Input products in catalog order.
        config: Thresholds for this run.
        texts: Normalized text per catalog position.
        eligible: Catalog positions that pass the length threshold.
        claims: Claim marks shared by the exact and near-duplicate passes.
    """

    products: Tuple[ProductRecord, ...]
    config: EngineConfig
    texts: List[NormalizedText]
    eligible: List[int]
    claims: ClaimRegistry

    @classmethod
    def build(cls, products: Sequence[ProductRecord], config: EngineConfig) -> "AnalysisContext":
        products = tuple(products)
        texts = [
            NormalizedText(
                token_set=normalize(p.description),
                ngram_set=ngrams(p.description, config.ngram_size),
            )
            for p in products
        ]
        eligible = [
            i for i, p in enumerate(products)
            if is_eligible(p.description, config.exact_min_length)
        ]
        return cls(
            products=products,
            config=config,
            texts=texts,
            eligible=eligible,
            claims=ClaimRegistry(len(products)),
        )

    def members(self, indices: Iterable[int]) -> Tuple[ProductRecord, ...]:
        return tuple(self.products[i] for i in indices)
