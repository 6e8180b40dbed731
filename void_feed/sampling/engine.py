"""Session-local, non-repeating random sampling of the discovery pool."""

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, FrozenSet, List, Optional

import structlog

from void_feed.config import FeedConfig
from void_feed.core.errors import FeedError
from void_feed.gateway.base import CandidateFilter, ContentStoreGateway, IdentityResolver
from void_feed.metrics import EXHAUSTIONS, SAMPLE_CYCLES, SAMPLE_LATENCY
from void_feed.models import EnrichedItem, Item
from void_feed.sampling.shuffle import fisher_yates_shuffle

logger = structlog.get_logger(__name__)


class SampleMode(str, Enum):
    """How a sampling cycle treats the session's seen set."""

    REFRESH = "refresh"
    APPEND = "append"


@dataclass(frozen=True)
class SampleResult:
    """Outcome of one sampling cycle.

    Attributes:
        items: Enriched page, in display order
        seen: Seen set the session should adopt
        exhausted: Whether every fetched candidate had already been seen
        fetched: Number of candidates returned by the store
    """

    items: List[EnrichedItem] = field(default_factory=list)
    seen: FrozenSet[str] = frozenset()
    exhausted: bool = False
    fetched: int = 0


class SamplingEngine:
    """Draws random, unseen pages from the content store and enriches them."""

    def __init__(
        self,
        store: ContentStoreGateway,
        resolver: IdentityResolver,
        config: Optional[FeedConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the sampling engine.

        Args:
            store: Source of candidate items
            resolver: Batch author lookup
            config: Feed settings; oversample_factor and visibility_mode are used here
            rng: Random source for shuffling, injectable for reproducible runs
        """
        self.store = store
        self.resolver = resolver
        self.config = config or FeedConfig()
        self.rng = rng or random.Random()

    def candidate_count(self, page_size: int) -> int:
        """Number of candidates requested for a page of ``page_size``."""
        return max(page_size, math.ceil(page_size * self.config.oversample_factor))

    async def sample(
        self, page_size: int, session_seen: AbstractSet[str], mode: SampleMode
    ) -> SampleResult:
        """Run one fetch, shuffle, filter, select and enrich cycle.

        Store and resolver errors propagate unchanged. Nothing is returned, and
        so no seen set changes, unless the whole cycle succeeds.

        Args:
            page_size: Maximum number of items in the page
            session_seen: Ids the session has already been exposed to
            mode: REFRESH ignores ``session_seen``; APPEND filters against it

        Returns:
            The page and the updated seen set
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        mode = SampleMode(mode)
        seen = frozenset(session_seen)
        with SAMPLE_LATENCY.time():
            try:
                result = await self._sample(page_size, seen, mode)
            except FeedError:
                SAMPLE_CYCLES.labels(mode=mode.value, outcome="error").inc()
                raise

        outcome = "success" if result.items else "empty"
        SAMPLE_CYCLES.labels(mode=mode.value, outcome=outcome).inc()
        logger.info(
            "Sampled feed page",
            mode=mode.value,
            fetched=result.fetched,
            selected=len(result.items),
            exhausted=result.exhausted,
            seen=len(result.seen),
        )
        return result

    async def _sample(self, page_size: int, seen: FrozenSet[str], mode: SampleMode) -> SampleResult:
        candidates = await self.store.fetch_candidates(
            CandidateFilter(
                visibility_mode=self.config.visibility_mode,
                max_count=self.candidate_count(page_size),
            )
        )
        if not candidates:
            return SampleResult(items=[], seen=seen, exhausted=False, fetched=0)

        shuffled = fisher_yates_shuffle(candidates, self.rng)

        exhausted = False
        base_seen = seen
        if mode is SampleMode.REFRESH:
            pool = shuffled
        else:
            pool = [item for item in shuffled if item.id not in seen]
            if not pool:
                exhausted = True
                pool = shuffled
                base_seen = frozenset()
                EXHAUSTIONS.inc()
                logger.info("Feed pool exhausted, resetting seen set", fetched=len(candidates))

        selected = pool[:page_size]
        items = await self.enrich(selected)

        # Every fetched candidate counts as exposed, not only the selected ones.
        updated_seen = base_seen | {item.id for item in candidates}
        return SampleResult(
            items=items, seen=updated_seen, exhausted=exhausted, fetched=len(candidates)
        )

    async def enrich(self, selected: List[Item]) -> List[EnrichedItem]:
        """Attach author summaries to ``selected`` using one resolver call."""
        author_ids = {item.author_id for item in selected if item.author_id}
        authors = await self.resolver.resolve_authors(author_ids) if author_ids else {}
        return [
            EnrichedItem(item=item, author=authors.get(item.author_id) if item.author_id else None)
            for item in selected
        ]
