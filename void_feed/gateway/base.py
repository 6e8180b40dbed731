"""Abstract interfaces for the content store and identity lookups."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Set

from void_feed.core.errors import StoreQueryError
from void_feed.models import AuthorSummary, Item

RECENCY_DESC = "created_at.desc"


@dataclass(frozen=True)
class CandidateFilter:
    """Query sent to the content store for one sampling cycle."""

    visibility_mode: str
    max_count: int
    order_by: str = RECENCY_DESC

    def validate(self) -> None:
        """Raise StoreQueryError if the filter cannot be executed."""
        if not self.visibility_mode:
            raise StoreQueryError("visibility_mode must not be empty")
        if not isinstance(self.max_count, int) or self.max_count < 1:
            raise StoreQueryError(
                "max_count must be a positive integer", details={"max_count": self.max_count}
            )
        if self.order_by != RECENCY_DESC:
            raise StoreQueryError(
                "Unsupported ordering", details={"order_by": self.order_by}
            )


class ContentStoreGateway(ABC):
    """Source of candidate items, newest first."""

    @abstractmethod
    async def fetch_candidates(self, candidate_filter: CandidateFilter) -> List[Item]:
        """Return up to ``candidate_filter.max_count`` items ordered by recency.

        Raises:
            StoreUnavailable: If the store cannot be reached
            StoreQueryError: If the filter is malformed
        """


class IdentityResolver(ABC):
    """Batch lookup of author summaries."""

    @abstractmethod
    async def resolve_authors(self, ids: Set[str]) -> Dict[str, AuthorSummary]:
        """Return summaries for the ids that exist; unknown ids are omitted.

        Raises:
            ResolverUnavailable: If the lookup fails as a whole
        """
