import random
from datetime import datetime, timedelta, timezone

import pytest

from void_feed.config import FeedConfig
from void_feed.gateway.memory import InMemoryContentStore, InMemoryIdentityResolver
from void_feed.models import AuthorSummary, Item
from void_feed.sampling.engine import SamplingEngine

BASE_TIME = datetime(2025, 3, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clear_env_vars(monkeypatch):
    """Keep backend settings from the developer's environment out of tests."""
    for name in ("VOID_FEED_BASE_URL", "VOID_FEED_API_KEY", "VOID_FEED_PAGE_SIZE", "VOID_FEED_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def make_item(index: int, author_id=None, **overrides) -> Item:
    """Build an item whose recency grows with ``index``."""
    fields = {
        "id": f"item-{index}",
        "title": f"Memo {index}",
        "body": f"Transcript of memo {index}",
        "duration_seconds": 30 + index,
        "created_at": BASE_TIME + timedelta(minutes=index),
        "tags": ["test"],
        "author_id": author_id,
    }
    fields.update(overrides)
    return Item(**fields)


@pytest.fixture
def build_item():
    return make_item


@pytest.fixture
def make_pool():
    """Factory for a pool of ``size`` items spread over three authors."""

    def _make(size):
        return [make_item(i, author_id=f"user-{i % 3}") for i in range(size)]

    return _make


@pytest.fixture
def authors():
    return {
        "user-0": AuthorSummary(display_name="Ana", avatar_ref="https://cdn.test/ana.png"),
        "user-1": AuthorSummary(display_name="Ben"),
    }


@pytest.fixture
def resolver(authors):
    return InMemoryIdentityResolver(authors)


@pytest.fixture
def make_engine(resolver):
    """Factory for an engine over an in-memory pool with a seeded RNG."""

    def _make(items, seed=7, **config):
        store = InMemoryContentStore(items)
        return SamplingEngine(store, resolver, FeedConfig(**config), rng=random.Random(seed))

    return _make
