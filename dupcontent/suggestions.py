"""Similar-product lookup and content advice for a single product."""
from __future__ import annotations

from collections.abc import Mapping
from typing import List, Sequence, Union

from dupcontent.analyzer import ConfigLike, coerce_products, resolve_config
from dupcontent.errors import ProductNotFound
from dupcontent.models import ProductRecord, ProductSuggestions, SimilarProduct
from dupcontent.similarity import jaccard, percent
from dupcontent.text import normalize
from dupcontent.utils.logger import log_info

DETAILED_DESCRIPTION_LENGTH = 100


def suggest_similar_products(
    products: Sequence[Union[ProductRecord, Mapping]],
    product_id: str,
    config: ConfigLike = None,
) -> ProductSuggestions:
    """Return the products most similar to ``product_id`` plus recommendations.

    Raises:
        InvalidInput: If ``products`` is malformed.
        ProductNotFound: If no product has the given id.
    """
    engine_config = resolve_config(config)
    records = coerce_products(products, engine_config.max_products)

    target = next((p for p in records if p.id == str(product_id)), None)
    if target is None:
        raise ProductNotFound(str(product_id))

    similar: List[SimilarProduct] = []
    if target.description:
        target_tokens = normalize(target.description)
        for product in records:
            if product is target or product.id == target.id or not product.description:
                continue
            score = jaccard(target_tokens, normalize(product.description))
            if score > engine_config.suggestion_threshold:
                similar.append(
                    SimilarProduct(id=product.id, title=product.title, similarity=percent(score))
                )

    similar.sort(key=lambda p: p.similarity, reverse=True)

    recommendations: List[str] = []
    if similar:
        recommendations.append(f"Found {len(similar)} products with similar descriptions")
        recommendations.append("Consider adding unique selling points to differentiate this product")
        recommendations.append("Include specific features, dimensions, or use cases unique to this product")
    if len(target.description) < DETAILED_DESCRIPTION_LENGTH:
        recommendations.append("Add a more detailed product description (aim for 150+ characters)")

    log_info("Product suggestions computed", product_id=target.id, similar=len(similar))
    return ProductSuggestions(
        product=target,
        similar_products=similar[:engine_config.suggestion_limit],
        recommendations=recommendations,
    )
