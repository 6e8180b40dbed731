"""REST gateways for a PostgREST-style backend."""

import asyncio
import time
from typing import Any, Dict, Iterable, List, Optional, Set, Type

import aiohttp
import structlog
from pydantic import ValidationError

from void_feed.config import BackendConfig
from void_feed.core.errors import (
    CircuitBreaker,
    FeedError,
    ResolverUnavailable,
    StoreQueryError,
    StoreUnavailable,
)
from void_feed.gateway.base import CandidateFilter, ContentStoreGateway, IdentityResolver
from void_feed.metrics import BACKEND_LATENCY, BACKEND_REQUESTS
from void_feed.models import ITEM_COLUMNS, AuthorSummary, Item

logger = structlog.get_logger(__name__)

RETRYABLE_STATUSES = {408, 429, 500, 502, 503, 504}
REJECTED_STATUSES = {400, 404}
PROFILE_COLUMNS = ("user_id", "display_name", "avatar_url")


def in_filter(values: Iterable[str]) -> str:
    """Format values as a PostgREST ``in.(...)`` filter with quoted members."""
    quoted = []
    for value in sorted(values):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        quoted.append(f'"{escaped}"')
    return f"in.({','.join(quoted)})"


class RestClient:
    """Shared HTTP transport for the REST gateways."""

    def __init__(self, config: BackendConfig, session: Optional[aiohttp.ClientSession] = None):
        """Initialize the REST client.

        Args:
            config: Backend connection settings
            session: Optional pre-built aiohttp session; the client closes only sessions it creates
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session
        self._owns_session = session is None
        self._breakers: Dict[str, CircuitBreaker] = {}

    async def __aenter__(self) -> "RestClient":
        await self._init_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _init_session(self):
        """Initialize aiohttp session with auth headers and a request timeout."""
        if self.session is None:
            headers = {
                "apikey": self.config.api_key,
                "Authorization": f"Bearer {self.config.api_key}",
                "Accept": "application/json",
                "User-Agent": "VoidFeed/1.0",
            }
            self.session = aiohttp.ClientSession(
                headers=headers, timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )

    def breaker(self, endpoint: str) -> CircuitBreaker:
        """Get or create the circuit breaker for an endpoint."""
        if endpoint not in self._breakers:
            self._breakers[endpoint] = CircuitBreaker(
                failure_threshold=self.config.failure_threshold,
                reset_timeout=self.config.reset_timeout,
            )
        return self._breakers[endpoint]

    async def get_rows(
        self,
        endpoint: str,
        params: Dict[str, str],
        unavailable: Type[FeedError],
        rejected: Type[FeedError],
    ) -> List[Dict[str, Any]]:
        """GET a table endpoint and return its JSON rows.

        Args:
            endpoint: Table name under the base URL
            params: Query parameters
            unavailable: Error raised when the backend cannot answer
            rejected: Error raised when the backend rejects the query

        Returns:
            Decoded rows
        """
        breaker = self.breaker(endpoint)
        if not breaker.can_proceed():
            BACKEND_REQUESTS.labels(endpoint=endpoint, status="circuit_open").inc()
            raise unavailable(f"Circuit open for {endpoint}", details={"endpoint": endpoint})

        await self._init_session()
        url = f"{self.base_url}/{endpoint}"
        last_error = None

        for attempt in range(1, self.config.max_retries + 1):
            start_time = time.monotonic()
            try:
                async with self.session.get(url, params=params) as response:
                    BACKEND_REQUESTS.labels(endpoint=endpoint, status=str(response.status)).inc()
                    if response.status == 200:
                        rows = await response.json()
                        if not isinstance(rows, list) or not all(
                            isinstance(row, dict) for row in rows
                        ):
                            breaker.record_failure()
                            raise unavailable(
                                f"Unexpected payload from {endpoint}",
                                details={"endpoint": endpoint, "type": type(rows).__name__},
                            )
                        breaker.record_success()
                        return rows

                    body = await response.text()
                    details = {"endpoint": endpoint, "status": response.status, "body": body[:500]}
                    if response.status in REJECTED_STATUSES:
                        raise rejected(f"{endpoint} rejected the query", details=details)
                    if response.status not in RETRYABLE_STATUSES:
                        breaker.record_failure()
                        raise unavailable(
                            f"{endpoint} request failed with HTTP {response.status}", details=details
                        )
                    last_error = f"HTTP {response.status}"
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                BACKEND_REQUESTS.labels(endpoint=endpoint, status="error").inc()
                last_error = str(e) or e.__class__.__name__
            finally:
                BACKEND_LATENCY.labels(endpoint=endpoint).observe(time.monotonic() - start_time)

            logger.warning(
                "Backend request failed", endpoint=endpoint, attempt=attempt, error=last_error
            )
            if attempt < self.config.max_retries:
                await asyncio.sleep(self.config.retry_backoff * 2 ** (attempt - 1))

        breaker.record_failure()
        raise unavailable(
            f"{endpoint} request failed after {self.config.max_retries} attempts: {last_error}",
            details={"endpoint": endpoint, "attempts": self.config.max_retries},
        )

    async def close(self):
        """Close the client session if this client created it."""
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None


class RestContentStore(ContentStoreGateway):
    """Content store reading the items table."""

    def __init__(self, client: RestClient):
        self.client = client
        self.table = client.config.items_table

    async def fetch_candidates(self, candidate_filter: CandidateFilter) -> List[Item]:
        candidate_filter.validate()
        params = {
            "select": ",".join(ITEM_COLUMNS),
            "visibility": f"eq.{candidate_filter.visibility_mode}",
            "order": candidate_filter.order_by,
            "limit": str(candidate_filter.max_count),
        }
        rows = await self.client.get_rows(self.table, params, StoreUnavailable, StoreQueryError)

        items = []
        for row in rows:
            try:
                items.append(Item.from_record(row))
            except ValidationError as e:
                logger.error(
                    "Error processing item", error=str(e), item_id=row.get("id", "unknown")
                )
        return items


class RestIdentityResolver(IdentityResolver):
    """Identity resolver reading the profiles table in one request."""

    def __init__(self, client: RestClient):
        self.client = client
        self.table = client.config.profiles_table

    async def resolve_authors(self, ids: Set[str]) -> Dict[str, AuthorSummary]:
        if not ids:
            return {}
        params = {"select": ",".join(PROFILE_COLUMNS), "user_id": in_filter(ids)}
        # A rejected lookup is still a failed lookup; there is no partial enrichment.
        rows = await self.client.get_rows(
            self.table, params, ResolverUnavailable, ResolverUnavailable
        )

        authors = {}
        for row in rows:
            author_id = row.get("user_id")
            if author_id in ids:
                authors[author_id] = AuthorSummary(
                    display_name=row.get("display_name"), avatar_ref=row.get("avatar_url")
                )
        return authors
