"""In-memory gateways backed by fixture data."""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

import structlog

from void_feed.gateway.base import CandidateFilter, ContentStoreGateway, IdentityResolver
from void_feed.models import AuthorSummary, Item

logger = structlog.get_logger(__name__)


class InMemoryContentStore(ContentStoreGateway):
    """Content store over a fixed list of items.

    All items are treated as belonging to ``visibility_mode``; a filter for any
    other mode matches nothing.
    """

    def __init__(self, items: Iterable[Item], visibility_mode: str = "void"):
        self.visibility_mode = visibility_mode
        self._items = sorted(items, key=lambda item: item.created_at, reverse=True)
        self.calls: List[CandidateFilter] = []

    def __len__(self) -> int:
        return len(self._items)

    def add(self, *items: Item) -> None:
        """Publish new items to the pool."""
        self._items = sorted([*self._items, *items], key=lambda item: item.created_at, reverse=True)

    async def fetch_candidates(self, candidate_filter: CandidateFilter) -> List[Item]:
        candidate_filter.validate()
        self.calls.append(candidate_filter)
        if candidate_filter.visibility_mode != self.visibility_mode:
            return []
        return list(self._items[: candidate_filter.max_count])


class InMemoryIdentityResolver(IdentityResolver):
    """Identity resolver over a fixed id -> summary mapping."""

    def __init__(self, authors: Optional[Dict[str, AuthorSummary]] = None):
        self._authors = dict(authors or {})
        self.calls: List[Set[str]] = []

    async def resolve_authors(self, ids: Set[str]) -> Dict[str, AuthorSummary]:
        if not ids:
            return {}
        self.calls.append(set(ids))
        return {author_id: self._authors[author_id] for author_id in ids if author_id in self._authors}


def load_fixture(path: Path) -> Tuple[InMemoryContentStore, InMemoryIdentityResolver]:
    """Build in-memory gateways from a JSON fixture.

    The file holds ``{"items": [<backend rows>], "authors": {<id>: {...}}}``.
    Item rows use backend column names (see ``void_feed.models.ITEM_COLUMNS``).
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    items = [Item.from_record(row) for row in data.get("items", [])]
    authors = {
        author_id: AuthorSummary(
            display_name=row.get("display_name"), avatar_ref=row.get("avatar_url")
        )
        for author_id, row in data.get("authors", {}).items()
    }
    logger.info("Loaded feed fixture", path=str(path), items=len(items), authors=len(authors))
    return InMemoryContentStore(items), InMemoryIdentityResolver(authors)
