"""Duplicate grouping for product catalogs.

Strategies run in a fixed order, from cheapest to most expensive: exact hash
buckets, greedy near-duplicate clustering, then template detection.
"""

from dupcontent.dedup.context import AnalysisContext, ClaimRegistry
from dupcontent.dedup.detector import DuplicateContentDetector

__all__ = ["AnalysisContext", "ClaimRegistry", "DuplicateContentDetector"]
