"""Data classes for products, duplicate groups and analysis reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class ProductRecord:
    """One catalog entry as supplied by the caller.

    Attributes:
        id: Catalog-unique product id.
        title: Product title.
        handle: URL handle / slug.
        description: Plain-text product description (may be empty).
    """

    id: str
    title: str = ""
    handle: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "handle": self.handle,
            "description": self.description,
        }


class GroupType(str, Enum):
    """Kind of duplication a group represents."""

    EXACT = "exact"
    SIMILAR = "similar"
    TEMPLATE = "template"


@dataclass(frozen=True)
class DuplicateGroup:
    """A set of products suspected of sharing content.

    Attributes:
        type: Which pass produced the group.
        similarity_score: Integer percentage 0-100.
        members: Products in discovery order; ``members[0]`` is the
            representative.
        issue_description: Human-readable problem statement.
        recommendation: Suggested fix.
    """

    type: GroupType
    similarity_score: int
    members: Tuple[ProductRecord, ...]
    issue_description: str
    recommendation: str

    @property
    def representative(self) -> ProductRecord:
        return self.members[0]

    @property
    def member_ids(self) -> List[str]:
        return [m.id for m in self.members]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "similarity_score": self.similarity_score,
            "members": [m.to_dict() for m in self.members],
            "issue_description": self.issue_description,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class ReportSummary:
    """Member counts per group type plus the distinct affected products."""

    exact_count: int = 0
    similar_count: int = 0
    template_count: int = 0
    affected_product_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "exact_count": self.exact_count,
            "similar_count": self.similar_count,
            "template_count": self.template_count,
            "affected_product_count": self.affected_product_count,
        }


@dataclass(frozen=True)
class DuplicateContentReport:
    total_products: int
    analyzed_products: int
    groups: Tuple[DuplicateGroup, ...]
    summary: ReportSummary
    uniqueness_score: int
    generated_at: datetime

    def groups_of(self, group_type: GroupType) -> List[DuplicateGroup]:
        return [g for g in self.groups if g.type is group_type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_products": self.total_products,
            "analyzed_products": self.analyzed_products,
            "groups": [g.to_dict() for g in self.groups],
            "summary": self.summary.to_dict(),
            "uniqueness_score": self.uniqueness_score,
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass(frozen=True)
class SimilarProduct:
    id: str
    title: str
    similarity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "similarity": self.similarity}


@dataclass
class ProductSuggestions:
    """Similar products and content advice for a single product."""

    product: ProductRecord
    similar_products: List[SimilarProduct] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": {
                "id": self.product.id,
                "title": self.product.title,
                "description": self.product.description,
            },
            "similar_products": [p.to_dict() for p in self.similar_products],
            "recommendations": list(self.recommendations),
        }
