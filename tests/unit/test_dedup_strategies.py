"""Unit tests for the grouping strategies and the detector orchestrator.

Tests each strategy in isolation plus the DuplicateContentDetector chain.
"""

import pytest

from dupcontent.config import EngineConfig
from dupcontent.dedup.context import AnalysisContext, ClaimRegistry, is_eligible
from dupcontent.dedup.detector import DuplicateContentDetector, build_default_strategies
from dupcontent.dedup.strategies import (
    ExactDuplicateGrouper,
    GroupingStrategy,
    NearDuplicateClusterer,
    TemplatePatternDetector,
    has_template_indicator,
)
from dupcontent.models import GroupType

pytestmark = pytest.mark.unit

SHIRT = "Premium cotton t-shirt, blue, size M, machine washable."
MUG_12 = (
    "Handcrafted ceramic coffee mug with glossy glaze, dishwasher safe "
    "and microwave friendly, holds twelve ounces"
)
MUG_16 = (
    "Handcrafted ceramic coffee mug with glossy glaze, dishwasher safe "
    "and microwave friendly, holds sixteen ounces"
)


def build_ctx(products, **overrides):
    return AnalysisContext.build(products, EngineConfig(**overrides))


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TestClaimRegistry:
    def test_starts_unclaimed(self):
        claims = ClaimRegistry(3)
        assert len(claims) == 3
        assert not any(claims.is_claimed(i) for i in range(3))
        assert claims.claimed_count == 0

    def test_claim_and_claim_all(self):
        claims = ClaimRegistry(4)
        claims.claim(1)
        claims.claim_all([2, 3])
        assert [claims.is_claimed(i) for i in range(4)] == [False, True, True, True]
        assert claims.claimed_count == 3


class TestAnalysisContext:
    def test_eligibility(self):
        assert is_eligible("x" * 50, 50)
        assert not is_eligible("x" * 49, 50)
        assert not is_eligible(" " * 60, 50)
        assert not is_eligible("", 0)

    def test_build_indexes_by_position(self, make_product):
        products = [make_product(SHIRT), make_product("too short"), make_product(MUG_12)]
        ctx = build_ctx(products)
        assert ctx.eligible == [0, 2]
        assert len(ctx.texts) == 3
        assert "premium" in ctx.texts[0].token_set
        assert ctx.texts[1].ngram_set  # short text still gets n-grams
        assert ctx.claims.claimed_count == 0


# ---------------------------------------------------------------------------
# Strategy 1 – ExactDuplicateGrouper
# ---------------------------------------------------------------------------


class TestExactDuplicateGrouper:
    def test_name(self):
        assert ExactDuplicateGrouper().name == "exact_duplicates"

    def test_identical_descriptions_grouped(self, make_product):
        products = [make_product(SHIRT), make_product(SHIRT)]
        ctx = build_ctx(products)
        groups = ExactDuplicateGrouper().run(ctx)

        assert len(groups) == 1
        group = groups[0]
        assert group.type is GroupType.EXACT
        assert group.similarity_score == 100
        assert group.member_ids == ["p1", "p2"]
        assert group.issue_description == "2 products have identical descriptions"
        assert ctx.claims.is_claimed(0) and ctx.claims.is_claimed(1)

    def test_case_and_outer_whitespace_ignored(self, make_product):
        products = [make_product(SHIRT), make_product("  " + SHIRT.upper() + "\n")]
        groups = ExactDuplicateGrouper().run(build_ctx(products))
        assert len(groups) == 1

    def test_short_descriptions_never_grouped(self, make_product):
        products = [make_product("Same short text"), make_product("Same short text")]
        ctx = build_ctx(products)
        assert ExactDuplicateGrouper().run(ctx) == []
        assert ctx.claims.claimed_count == 0

    def test_whitespace_only_never_grouped(self, make_product):
        products = [make_product(" " * 60), make_product(" " * 60)]
        assert ExactDuplicateGrouper().run(build_ctx(products)) == []

    def test_groups_in_first_occurrence_order(self, make_product):
        products = [
            make_product(MUG_12),
            make_product(SHIRT),
            make_product(SHIRT),
            make_product(MUG_12),
        ]
        groups = ExactDuplicateGrouper().run(build_ctx(products))
        assert [g.member_ids for g in groups] == [["p1", "p4"], ["p2", "p3"]]

    def test_min_length_is_configurable(self, make_product):
        products = [make_product("Same short text"), make_product("Same short text")]
        groups = ExactDuplicateGrouper().run(build_ctx(products, exact_min_length=5))
        assert len(groups) == 1


# ---------------------------------------------------------------------------
# Strategy 2 – NearDuplicateClusterer
# ---------------------------------------------------------------------------


class TestNearDuplicateClusterer:
    def test_name(self):
        assert NearDuplicateClusterer().name == "near_duplicates"

    def test_reworded_descriptions_grouped(self, make_product):
        products = [make_product(MUG_12), make_product(MUG_16)]
        ctx = build_ctx(products)
        groups = NearDuplicateClusterer().run(ctx)

        assert len(groups) == 1
        group = groups[0]
        assert group.type is GroupType.SIMILAR
        # 14 shared tokens out of 16
        assert group.similarity_score == 88
        assert group.issue_description == "2 products have very similar descriptions (88% similar)"
        assert ctx.claims.claimed_count == 2

    def test_threshold_is_strict(self, make_product):
        # 7 shared tokens, union of 10 -> exactly 0.7
        a = "amber birch cedar dahlia elm fern ginger hazel"
        b = "amber birch cedar dahlia elm fern ginger ivory jasmine"
        products = [make_product(a), make_product(b)]
        assert NearDuplicateClusterer().run(build_ctx(products, exact_min_length=10)) == []

    def test_greedy_anchor_collects_members(self, greedy_triplet):
        ctx = build_ctx(greedy_triplet)
        groups = NearDuplicateClusterer().run(ctx)

        assert len(groups) == 1
        # b and c are only 8/12 similar to each other, but both match anchor a
        assert groups[0].member_ids == ["a", "b", "c"]
        assert groups[0].similarity_score == 82

    def test_lowest_index_anchor_wins(self, greedy_triplet):
        a, b, c = greedy_triplet
        groups = NearDuplicateClusterer().run(build_ctx([b, a, c]))

        assert len(groups) == 1
        assert groups[0].member_ids == ["b", "a"]

    def test_skips_claimed_products(self, make_product):
        products = [make_product(MUG_12), make_product(MUG_16)]
        ctx = build_ctx(products)
        ctx.claims.claim(0)
        assert NearDuplicateClusterer().run(ctx) == []

    def test_explicit_threshold_overrides_config(self, make_product):
        products = [make_product(MUG_12), make_product(MUG_16)]
        assert NearDuplicateClusterer(threshold=0.9).run(build_ctx(products)) == []

    def test_commit_filters_products_claimed_meanwhile(self, greedy_triplet):
        ctx = build_ctx(greedy_triplet)
        clusterer = NearDuplicateClusterer()
        pool = clusterer.candidates(ctx)
        proposal = clusterer.propose(ctx, pool, 0)
        assert [other for other, _ in proposal] == [1, 2]

        ctx.claims.claim(1)
        group = clusterer.commit(ctx, 0, proposal)
        assert group.member_ids == ["a", "c"]

    def test_commit_with_claimed_anchor(self, greedy_triplet):
        ctx = build_ctx(greedy_triplet)
        ctx.claims.claim(0)
        assert NearDuplicateClusterer().commit(ctx, 0, [(1, 0.9)]) is None

    @pytest.mark.asyncio
    async def test_run_async_matches_run(self, greedy_triplet, make_product):
        products = greedy_triplet + [make_product(MUG_12), make_product(MUG_16)]

        serial = NearDuplicateClusterer().run(build_ctx(products))
        parallel = await NearDuplicateClusterer().run_async(build_ctx(products), max_workers=3)

        assert parallel == serial

    @pytest.mark.asyncio
    async def test_run_async_reconciles_in_catalog_order(self, greedy_triplet):
        a, b, c = greedy_triplet
        groups = await NearDuplicateClusterer().run_async(build_ctx([b, a, c]), max_workers=2)
        assert [g.member_ids for g in groups] == [["b", "a"]]


# ---------------------------------------------------------------------------
# Strategy 3 – TemplatePatternDetector
# ---------------------------------------------------------------------------

MUSTACHE = "This {{product}} is crafted from durable materials and built to last for years of daily use."
MUSTACHE_FILLED = "This {product} is crafted from durable materials and built to last for years of daily use."


class TestTemplateIndicators:
    @pytest.mark.parametrize(
        "text",
        [
            "Meet [Product Name], our best seller.",
            "Meet [productname] today.",
            "Made by [BRAND] in Italy.",
            "Hello {{ customer }} and welcome.",
            "INSERT DESCRIPTION HERE",
            "please insert your copy here",
            "Lorem ipsum dolor sit amet.",
            "This is PLACEHOLDER text.",
        ],
    )
    def test_indicator_hits(self, text):
        assert has_template_indicator(text)

    @pytest.mark.parametrize(
        "text",
        [
            "A sturdy oak bookshelf with five shelves.",
            "Brand new [limited] edition.",
            "Single {brace} only.",
            "INSERTHERE",
            "regex chars (.*+?[ ] are just text",
        ],
    )
    def test_indicator_misses(self, text):
        assert not has_template_indicator(text)


class TestTemplatePatternDetector:
    def test_name(self):
        assert TemplatePatternDetector().name == "template_patterns"

    def test_single_placeholder_product(self, make_product, unrelated_products):
        templated = make_product("Introducing [Product Name], the perfect addition to your home.")
        products = unrelated_products + [templated]
        groups = TemplatePatternDetector().run(build_ctx(products))

        assert len(groups) == 1
        group = groups[0]
        assert group.type is GroupType.TEMPLATE
        assert group.similarity_score == 80
        assert group.member_ids == [templated.id]
        assert group.issue_description == "1 products appear to use template descriptions"

    def test_propagates_to_similar_boilerplate(self, make_product, unrelated_products):
        hit = make_product(MUSTACHE)
        filled = make_product(MUSTACHE_FILLED)
        products = [hit] + unrelated_products + [filled]
        groups = TemplatePatternDetector().run(build_ctx(products))

        assert groups[0].member_ids == [hit.id, filled.id]

    def test_ignores_length_threshold_and_claims(self, make_product):
        products = [make_product("Lorem ipsum"), make_product(MUSTACHE)]
        ctx = build_ctx(products)
        ctx.claims.claim_all([0, 1])
        groups = TemplatePatternDetector().run(ctx)

        assert groups[0].member_ids == ["p1", "p2"]

    def test_long_indicator_description_is_member(self, make_product):
        long_text = "[Brand] " + " ".join(
            f"unique feature number {i} described at length" for i in range(10)
        )
        product = make_product(long_text)
        groups = TemplatePatternDetector().run(build_ctx([product]))
        assert groups[0].member_ids == [product.id]

    def test_no_indicator_no_group(self, unrelated_products):
        assert TemplatePatternDetector().run(build_ctx(unrelated_products)) == []

    def test_empty_descriptions_skipped(self, make_product):
        products = [make_product(""), make_product("   ")]
        assert TemplatePatternDetector().run(build_ctx(products)) == []


# ---------------------------------------------------------------------------
# DuplicateContentDetector
# ---------------------------------------------------------------------------


class RecordingStrategy(GroupingStrategy):
    def __init__(self, label, calls):
        self.label = label
        self.calls = calls

    @property
    def name(self):
        return self.label

    def run(self, ctx):
        self.calls.append(self.label)
        return []


class TestDuplicateContentDetector:
    def test_default_chain_order(self):
        names = [s.name for s in build_default_strategies()]
        assert names == ["exact_duplicates", "near_duplicates", "template_patterns"]

    def test_runs_every_strategy_in_order(self, make_product):
        calls = []
        detector = DuplicateContentDetector(
            [RecordingStrategy("first", calls), RecordingStrategy("second", calls)]
        )
        assert detector.detect(build_ctx([make_product(SHIRT)])) == []
        assert calls == ["first", "second"]

    def test_exact_claims_block_similar(self, make_product):
        products = [
            make_product(MUG_12),
            make_product(MUG_12.upper()),
            make_product(MUG_16),
        ]
        groups = DuplicateContentDetector().detect(build_ctx(products))

        assert [g.type for g in groups] == [GroupType.EXACT]
        assert groups[0].member_ids == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_detect_async_default_strategy_fallback(self, make_product):
        calls = []
        detector = DuplicateContentDetector([RecordingStrategy("only", calls)])
        assert await detector.detect_async(build_ctx([make_product(SHIRT)]), max_workers=2) == []
        assert calls == ["only"]
