"""Duplicate, near-duplicate and template detection for product catalogs."""

from dupcontent.analyzer import analyze, analyze_async
from dupcontent.config import EngineConfig
from dupcontent.errors import DuplicateContentError, InvalidInput, ProductNotFound
from dupcontent.models import (
    DuplicateContentReport,
    DuplicateGroup,
    GroupType,
    ProductRecord,
    ProductSuggestions,
    ReportSummary,
    SimilarProduct,
)
from dupcontent.suggestions import suggest_similar_products

__version__ = "0.1.0"

__all__ = [
    "analyze",
    "analyze_async",
    "suggest_similar_products",
    "EngineConfig",
    "DuplicateContentError",
    "InvalidInput",
    "ProductNotFound",
    "DuplicateContentReport",
    "DuplicateGroup",
    "GroupType",
    "ProductRecord",
    "ProductSuggestions",
    "ReportSummary",
    "SimilarProduct",
]
