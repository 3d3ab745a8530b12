"""Public entry points for catalog duplicate-content analysis.

``analyze`` validates the caller's product list, builds the per-call analysis
context, runs the grouping chain and aggregates the report. ``analyze_async``
does the same but spreads the near-duplicate comparisons over a worker pool.
"""
from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from dupcontent.config import EngineConfig
from dupcontent.dedup.context import AnalysisContext
from dupcontent.dedup.detector import DuplicateContentDetector
from dupcontent.errors import InvalidInput
from dupcontent.models import DuplicateContentReport, ProductRecord
from dupcontent.report import build_report
from dupcontent.utils.logger import log_info, log_warning

ConfigLike = Union[EngineConfig, Mapping, None]

_TEXT_FIELDS = ("title", "handle", "description")


def resolve_config(config: ConfigLike) -> EngineConfig:
    """Accept an ``EngineConfig``, a mapping of its fields, or *None* for defaults.

    Mapping keys may use the snake_case field names or their camelCase
    aliases; unknown keys raise ``InvalidInput``. Defaults are fixed and do
    not depend on the environment.
    """
    if config is None:
        return EngineConfig()
    if isinstance(config, EngineConfig):
        return config
    if isinstance(config, Mapping):
        try:
            return EngineConfig.model_validate(dict(config))
        except ValidationError as e:
            raise InvalidInput(f"Invalid engine configuration: {e}") from e
    raise InvalidInput(f"config must be EngineConfig or a mapping, got {type(config).__name__}")


def coerce_product(item: Any, position: int) -> ProductRecord:
    """Build a ``ProductRecord`` from a record or a mapping.

    Missing text fields default to ``""`` and a ``None`` text field is
    treated as empty, for records and mappings alike. Integer ids are
    converted to strings.
    """
    if isinstance(item, ProductRecord):
        blanks = {name: "" for name in _TEXT_FIELDS if getattr(item, name) is None}
        record = replace(item, **blanks) if blanks else item
    elif isinstance(item, Mapping):
        raw_id = item.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)):
            raise InvalidInput(f"Product at position {position} has no valid id")
        fields = {}
        for name in _TEXT_FIELDS:
            value = item.get(name)
            if value is None:
                value = ""
            fields[name] = value
        record = ProductRecord(id=str(raw_id), **fields)
    else:
        raise InvalidInput(
            f"Product at position {position} must be a ProductRecord or mapping, "
            f"got {type(item).__name__}"
        )

    if not isinstance(record.id, str) or not record.id.strip():
        raise InvalidInput(f"Product at position {position} has an empty id")
    for name in _TEXT_FIELDS:
        if not isinstance(getattr(record, name), str):
            raise InvalidInput(f"Product {record.id}: field '{name}' must be a string")
    return record


def coerce_products(products: Any, max_products: int = 0) -> List[ProductRecord]:
    """Validate the whole product list before any analysis starts."""
    if not isinstance(products, (list, tuple)):
        raise InvalidInput(f"products must be a list, got {type(products).__name__}")
    if max_products and len(products) > max_products:
        raise InvalidInput(
            f"Too many products: {len(products)} (limit {max_products})"
        )

    records = [coerce_product(item, i) for i, item in enumerate(products)]

    ids = [r.id for r in records]
    if len(set(ids)) != len(ids):
        log_warning("Duplicate product ids in input", total=len(ids), distinct=len(set(ids)))
    return records


def _prepare(products: Any, config: ConfigLike) -> AnalysisContext:
    engine_config = resolve_config(config)
    records = coerce_products(products, engine_config.max_products)
    return AnalysisContext.build(records, engine_config)


def _finish(
    ctx: AnalysisContext,
    groups: Sequence,
    generated_at: Optional[datetime],
    started: float,
) -> DuplicateContentReport:
    report = build_report(
        total_products=len(ctx.products),
        analyzed_products=len(ctx.eligible),
        groups=groups,
        generated_at=generated_at or datetime.now(timezone.utc),
    )
    log_info(
        "Duplicate content analysis completed",
        total_products=report.total_products,
        analyzed_products=report.analyzed_products,
        groups=len(report.groups),
        affected_products=report.summary.affected_product_count,
        uniqueness_score=report.uniqueness_score,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return report


def analyze(
    products: Sequence[Union[ProductRecord, Mapping]],
    config: ConfigLike = None,
    *,
    generated_at: Optional[datetime] = None,
    detector: Optional[DuplicateContentDetector] = None,
) -> DuplicateContentReport:
    """Find exact, near-duplicate and templated descriptions in a catalog.

    Args:
        products: Catalog entries as ``ProductRecord`` objects or mappings with
            ``id``, ``title``, ``handle`` and ``description`` keys.
        config: ``EngineConfig``, mapping of its fields, or *None* for defaults.
        generated_at: Timestamp to stamp on the report; defaults to now (UTC).
        detector: Custom strategy chain; defaults to the standard one.

    Returns:
        ``DuplicateContentReport`` for the catalog.

    Raises:
        InvalidInput: If ``products`` or ``config`` is malformed.
    """
    started = time.perf_counter()
    ctx = _prepare(products, config)
    log_info(
        "Starting duplicate content analysis",
        total_products=len(ctx.products),
        eligible_products=len(ctx.eligible),
    )

    groups = (detector or DuplicateContentDetector()).detect(ctx)
    return _finish(ctx, groups, generated_at, started)


async def analyze_async(
    products: Sequence[Union[ProductRecord, Mapping]],
    config: ConfigLike = None,
    *,
    max_workers: Optional[int] = None,
    generated_at: Optional[datetime] = None,
    detector: Optional[DuplicateContentDetector] = None,
) -> DuplicateContentReport:
    """Async variant of ``analyze`` with parallel near-duplicate comparisons.

    Produces the same groups as ``analyze`` for the same input.

    Args:
        max_workers: Concurrent comparison workers; defaults to
            ``config.async_max_workers``.
    """
    started = time.perf_counter()
    ctx = _prepare(products, config)
    workers = max_workers or ctx.config.async_max_workers
    log_info(
        "Starting async duplicate content analysis",
        total_products=len(ctx.products),
        eligible_products=len(ctx.eligible),
        workers=workers,
    )

    groups = await (detector or DuplicateContentDetector()).detect_async(ctx, workers)
    return _finish(ctx, groups, generated_at, started)
