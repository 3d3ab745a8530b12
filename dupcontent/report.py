"""Aggregate duplicate groups into a catalog report."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Sequence

from dupcontent.models import (
    DuplicateContentReport,
    DuplicateGroup,
    GroupType,
    ReportSummary,
)
from dupcontent.similarity import round_half_up


def uniqueness_score(affected: int, total: int) -> int:
    """Percentage of products not involved in any group; 100 for an empty catalog."""
    if total <= 0:
        return 100
    score = round_half_up((1 - affected / total) * 100)
    return max(0, min(100, score))


def summarize(groups: Sequence[DuplicateGroup]) -> ReportSummary:
    counts: Dict[GroupType, int] = {group_type: 0 for group_type in GroupType}
    affected = set()
    for group in groups:
        if group.type not in counts:
            raise ValueError(f"Unknown group type: {group.type!r}")
        counts[group.type] += len(group.members)
        affected.update(group.member_ids)

    return ReportSummary(
        exact_count=counts[GroupType.EXACT],
        similar_count=counts[GroupType.SIMILAR],
        template_count=counts[GroupType.TEMPLATE],
        affected_product_count=len(affected),
    )


def build_report(
    total_products: int,
    analyzed_products: int,
    groups: Sequence[DuplicateGroup],
    generated_at: datetime,
) -> DuplicateContentReport:
    summary = summarize(groups)
    return DuplicateContentReport(
        total_products=total_products,
        analyzed_products=analyzed_products,
        groups=tuple(groups),
        summary=summary,
        uniqueness_score=uniqueness_score(summary.affected_product_count, total_products),
        generated_at=generated_at,
    )
