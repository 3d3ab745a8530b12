"""Individual duplicate-grouping strategies.

Each strategy implements the ``GroupingStrategy`` protocol: a ``run`` method
that receives the per-call ``AnalysisContext`` and returns the groups it
found. Strategies run in a fixed order, cheapest first; the exact and
near-duplicate passes claim the products they group so later passes skip them.
"""

from __future__ import annotations

import abc
import asyncio
import re
from typing import Dict, List, Optional, Sequence, Tuple

from dupcontent.dedup.context import AnalysisContext, has_text
from dupcontent.models import DuplicateGroup, GroupType
from dupcontent.similarity import jaccard, percent
from dupcontent.text import exact_key, ngrams
from dupcontent.utils.logger import log_debug

# ---------------------------------------------------------------------------
# Base protocol
# ---------------------------------------------------------------------------


class GroupingStrategy(abc.ABC):
    """Abstract base for grouping strategies."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short machine-readable name for logs."""

    @abc.abstractmethod
    def run(self, ctx: AnalysisContext) -> List[DuplicateGroup]:
        """Run the strategy over the catalog.

        Args:
            ctx: Per-call analysis state. Strategies may claim products
                through ``ctx.claims``.

        Returns:
            The groups found, in discovery order.
        """

    async def run_async(self, ctx: AnalysisContext, max_workers: int) -> List[DuplicateGroup]:
        """Async variant; strategies without parallel work just call ``run``."""
        return self.run(ctx)


# ---------------------------------------------------------------------------
# Strategy 1 – Exact duplicates (hash buckets, O(n))
# ---------------------------------------------------------------------------


class ExactDuplicateGrouper(GroupingStrategy):
    """Bucket eligible descriptions by their trimmed, lowercased text.

    Every bucket holding two or more products becomes one group and all of its
    members are claimed.
    """

    RECOMMENDATION = "Create unique descriptions for each product to help AI distinguish them"

    @property
    def name(self) -> str:
        return "exact_duplicates"

    def run(self, ctx: AnalysisContext) -> List[DuplicateGroup]:
        buckets: Dict[str, List[int]] = {}
        for index in ctx.eligible:
            key = exact_key(ctx.products[index].description)
            buckets.setdefault(key, []).append(index)

        groups: List[DuplicateGroup] = []
        for indices in buckets.values():
            if len(indices) < 2:
                continue
            groups.append(
                DuplicateGroup(
                    type=GroupType.EXACT,
                    similarity_score=100,
                    members=ctx.members(indices),
                    issue_description=f"{len(indices)} products have identical descriptions",
                    recommendation=self.RECOMMENDATION,
                )
            )
            ctx.claims.claim_all(indices)

        log_debug("Exact duplicate pass done", groups=len(groups), buckets=len(buckets))
        return groups


# ---------------------------------------------------------------------------
# Strategy 2 – Near duplicates (greedy anchor clustering, O(n²))
# ---------------------------------------------------------------------------

Proposal = List[Tuple[int, float]]


class NearDuplicateClusterer(GroupingStrategy):
    """Greedy clustering of unclaimed eligible products by token Jaccard.

    Each unclaimed product, in catalog order, becomes an anchor and collects
    every later unclaimed product whose similarity to it exceeds the threshold.
    Members are compared with the anchor only, never with each other. The
    reported score is the anchor's mean similarity to the other members.

    The comparison work per anchor is independent, so ``run_async`` computes
    all proposals concurrently and then commits them serially in catalog
    order; the lowest-index anchor always wins a contested product.
    """

    RECOMMENDATION = "Differentiate these descriptions by highlighting unique features of each product"

    def __init__(self, threshold: Optional[float] = None):
        self.threshold = threshold

    @property
    def name(self) -> str:
        return "near_duplicates"

    def _threshold(self, ctx: AnalysisContext) -> float:
        return self.threshold if self.threshold is not None else ctx.config.similar_threshold

    def candidates(self, ctx: AnalysisContext) -> List[int]:
        return [i for i in ctx.eligible if not ctx.claims.is_claimed(i)]

    def propose(self, ctx: AnalysisContext, pool: Sequence[int], position: int) -> Proposal:
        """Compare the anchor at ``pool[position]`` with every later product."""
        threshold = self._threshold(ctx)
        anchor_tokens = ctx.texts[pool[position]].token_set
        proposal: Proposal = []
        for other in pool[position + 1:]:
            if ctx.claims.is_claimed(other):
                continue
            score = jaccard(anchor_tokens, ctx.texts[other].token_set)
            if score > threshold:
                proposal.append((other, score))
        return proposal

    def commit(self, ctx: AnalysisContext, anchor: int, proposal: Proposal) -> Optional[DuplicateGroup]:
        """Turn a proposal into a group, skipping products claimed meanwhile."""
        if ctx.claims.is_claimed(anchor):
            return None
        matches = [(other, score) for other, score in proposal if not ctx.claims.is_claimed(other)]
        if not matches:
            return None

        indices = [anchor] + [other for other, _ in matches]
        avg_similarity = percent(sum(score for _, score in matches) / len(matches))
        ctx.claims.claim_all(indices)
        return DuplicateGroup(
            type=GroupType.SIMILAR,
            similarity_score=avg_similarity,
            members=ctx.members(indices),
            issue_description=(
                f"{len(indices)} products have very similar descriptions ({avg_similarity}% similar)"
            ),
            recommendation=self.RECOMMENDATION,
        )

    def reconcile(self, ctx: AnalysisContext, pool: Sequence[int], proposals: Sequence[Proposal]) -> List[DuplicateGroup]:
        groups: List[DuplicateGroup] = []
        for anchor, proposal in zip(pool, proposals):
            group = self.commit(ctx, anchor, proposal)
            if group is not None:
                groups.append(group)
        return groups

    def run(self, ctx: AnalysisContext) -> List[DuplicateGroup]:
        pool = self.candidates(ctx)
        groups: List[DuplicateGroup] = []
        for position, anchor in enumerate(pool):
            if ctx.claims.is_claimed(anchor):
                continue
            group = self.commit(ctx, anchor, self.propose(ctx, pool, position))
            if group is not None:
                groups.append(group)

        log_debug("Near duplicate pass done", candidates=len(pool), groups=len(groups))
        return groups

    async def run_async(self, ctx: AnalysisContext, max_workers: int) -> List[DuplicateGroup]:
        pool = self.candidates(ctx)
        semaphore = asyncio.Semaphore(max_workers)
        loop = asyncio.get_running_loop()

        async def _propose(position: int) -> Proposal:
            async with semaphore:
                return await loop.run_in_executor(None, self.propose, ctx, pool, position)

        # Claims are not written until every proposal is back
        proposals = await asyncio.gather(*(_propose(p) for p in range(len(pool))))
        groups = self.reconcile(ctx, pool, proposals)

        log_debug(
            "Near duplicate pass done (async)",
            candidates=len(pool),
            groups=len(groups),
            workers=max_workers,
        )
        return groups


# ---------------------------------------------------------------------------
# Strategy 3 – Template detection (indicator scan + n-gram propagation)
# ---------------------------------------------------------------------------

TEMPLATE_INDICATORS = (
    re.compile(r"\[product\s*name\]", re.IGNORECASE),
    re.compile(r"\[brand\]", re.IGNORECASE),
    re.compile(r"\{\{.*?\}\}"),
    re.compile(r"INSERT\s+.*?\s+HERE", re.IGNORECASE),
    re.compile(r"Lorem ipsum", re.IGNORECASE),
    re.compile(r"placeholder", re.IGNORECASE),
)

SAMPLE_LENGTH = 100
TEMPLATE_SIMILARITY = 80


def has_template_indicator(description: str) -> bool:
    return any(pattern.search(description) for pattern in TEMPLATE_INDICATORS)


class TemplatePatternDetector(GroupingStrategy):
    """Flag placeholder text and the boilerplate that wraps it.

    Runs over every product with a non-empty description, regardless of
    length or claims. Products matching an indicator supply their first 100
    characters as samples; any product whose n-gram similarity to a sample
    exceeds the threshold joins the single template group. Indicator hits are
    always members, even when a long description falls below the threshold
    against its own sample.
    """

    RECOMMENDATION = "Replace template text with unique, specific product information"

    def __init__(self, threshold: Optional[float] = None):
        self.threshold = threshold

    @property
    def name(self) -> str:
        return "template_patterns"

    def run(self, ctx: AnalysisContext) -> List[DuplicateGroup]:
        threshold = self.threshold if self.threshold is not None else ctx.config.template_threshold
        n = ctx.config.ngram_size

        pool = [i for i, p in enumerate(ctx.products) if has_text(p.description)]
        hits = {i for i in pool if has_template_indicator(ctx.products[i].description)}
        if not hits:
            return []

        samples = [
            ngrams(ctx.products[i].description[:SAMPLE_LENGTH], n)
            for i in sorted(hits)
        ]
        indices = [
            i for i in pool
            if i in hits
            or any(jaccard(ctx.texts[i].ngram_set, sample) > threshold for sample in samples)
        ]

        log_debug(
            "Template pass done",
            indicator_hits=len(hits),
            members=len(indices),
        )
        return [
            DuplicateGroup(
                type=GroupType.TEMPLATE,
                similarity_score=TEMPLATE_SIMILARITY,
                members=ctx.members(indices),
                issue_description=f"{len(indices)} products appear to use template descriptions",
                recommendation=self.RECOMMENDATION,
            )
        ]
