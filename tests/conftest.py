"""Pytest configuration and fixtures for dupcontent tests."""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dupcontent.config import EngineConfig
from dupcontent.models import ProductRecord


FIXED_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

UNRELATED_DESCRIPTIONS = [
    "Stainless steel water bottle keeps drinks cold for twenty four hours on hikes.",
    "Organic lavender soap bar made with shea butter and essential oils for skin.",
    "Wireless noise cancelling headphones offering thirty hours of battery playback.",
    "Hand woven jute doormat adds rustic charm to every front porch or entryway.",
    "Cast iron skillet preseasoned at the foundry, ready for searing steaks tonight.",
    "Kids wooden puzzle featuring farm animals that encourages early motor skills.",
    "Bamboo cutting board with juice groove, gentle on knives and easy to clean.",
    "Merino wool hiking socks cushion the heel and wick moisture on long trails.",
    "LED desk lamp with adjustable color temperature and a USB charging port.",
    "Yoga mat made from natural rubber, offering grip during hot vinyasa sessions.",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep DUPCONTENT_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("DUPCONTENT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixed_time():
    return FIXED_TIME


@pytest.fixture
def engine_config():
    return EngineConfig()


@pytest.fixture
def make_product():
    """Factory for products with sequential ids."""
    counter = {"n": 0}

    def _make(description, title=None, product_id=None):
        counter["n"] += 1
        pid = product_id or f"p{counter['n']}"
        return ProductRecord(
            id=pid,
            title=title or f"Product {pid}",
            handle=f"product-{pid}",
            description=description,
        )

    return _make


@pytest.fixture
def unrelated_products(make_product):
    return [make_product(d) for d in UNRELATED_DESCRIPTIONS]


@pytest.fixture
def greedy_triplet(make_product):
    """A is >0.7 similar to B and C, but B and C are only 0.667 similar."""
    return [
        make_product("alpha bravo charlie delta echo foxtrot golf hotel india juliet", product_id="a"),
        make_product("alpha bravo charlie delta echo foxtrot golf hotel india kilo", product_id="b"),
        make_product("alpha bravo charlie delta echo foxtrot golf hotel lima juliet", product_id="c"),
    ]


@pytest.fixture
def restore_logger():
    """Undo level/handler changes made to the engine logger."""
    from dupcontent.utils import logger as logger_module

    log = logger_module.logger
    saved = (log.level, list(log.handlers), log.propagate, logger_module._max_context_length)
    yield log
    log.setLevel(saved[0])
    log.handlers = saved[1]
    log.propagate = saved[2]
    logger_module._max_context_length = saved[3]
