"""Orchestrator for the duplicate-grouping chain.

The ``DuplicateContentDetector`` runs every strategy in order and collects
their groups. Unlike a short-circuiting chain, all strategies always run: the
exact and near-duplicate passes hand over through the shared claim marks, and
the template pass looks at the whole catalog.
"""

from __future__ import annotations

from typing import List, Optional

from dupcontent.dedup.context import AnalysisContext
from dupcontent.dedup.strategies import (
    GroupingStrategy,
    ExactDuplicateGrouper,
    NearDuplicateClusterer,
    TemplatePatternDetector,
)
from dupcontent.models import DuplicateGroup
from dupcontent.utils.logger import log_debug


def build_default_strategies() -> List[GroupingStrategy]:
    """Build the default ordered chain of grouping strategies.

    The order matters:
      1. ExactDuplicateGrouper   – O(n), hash buckets; claims members
      2. NearDuplicateClusterer  – O(n²), skips claimed products
      3. TemplatePatternDetector – independent full-catalog pass
    """
    return [
        ExactDuplicateGrouper(),
        NearDuplicateClusterer(),
        TemplatePatternDetector(),
    ]


class DuplicateContentDetector:
    """Run the grouping strategies over one analysis context.

    Args:
        strategies: Ordered list of strategies to run. Defaults to
            ``build_default_strategies()`` if *None*.

    Usage::

        ctx = AnalysisContext.build(products, EngineConfig())
        groups = DuplicateContentDetector().detect(ctx)
    """

    def __init__(self, strategies: Optional[List[GroupingStrategy]] = None):
        self.strategies = (
            strategies if strategies is not None else build_default_strategies()
        )

    def detect(self, ctx: AnalysisContext) -> List[DuplicateGroup]:
        groups: List[DuplicateGroup] = []
        for strategy in self.strategies:
            found = strategy.run(ctx)
            log_debug("Strategy finished", strategy=strategy.name, groups=len(found))
            groups.extend(found)
        return groups

    async def detect_async(self, ctx: AnalysisContext, max_workers: int) -> List[DuplicateGroup]:
        """Same as ``detect``; strategies may spread their work over workers."""
        groups: List[DuplicateGroup] = []
        for strategy in self.strategies:
            found = await strategy.run_async(ctx, max_workers)
            log_debug("Strategy finished", strategy=strategy.name, groups=len(found))
            groups.extend(found)
        return groups
