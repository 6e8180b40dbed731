"""Per-client feed session."""

import asyncio
import uuid
from enum import Enum
from typing import FrozenSet, List, Optional

import structlog

from void_feed.core.errors import FeedError, SessionClosedError
from void_feed.metrics import ACTIVE_SESSIONS, DROPPED_CALLS
from void_feed.models import EnrichedItem
from void_feed.sampling.engine import SampleMode, SamplingEngine

logger = structlog.get_logger(__name__)


class SessionState(str, Enum):
    """Observable states of a feed session."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    CLOSED = "closed"


class FeedSession:
    """One client's browsing session over the void feed.

    The session owns its item list and seen set exclusively and runs at most
    one sampling cycle at a time. Calls made while a cycle is in flight are
    dropped. ``close()`` cancels the in-flight cycle and its result is never
    applied.
    """

    def __init__(self, engine: SamplingEngine, page_size: Optional[int] = None):
        """Initialize the feed session.

        Args:
            engine: Sampling engine shared by the session's cycles
            page_size: Items per page, defaults to the engine's configured page size
        """
        self.engine = engine
        self.page_size = page_size if page_size is not None else engine.config.page_size
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.session_id = uuid.uuid4().hex
        self.state = SessionState.IDLE
        self.last_error: Optional[FeedError] = None
        self._items: List[EnrichedItem] = []
        self._seen: FrozenSet[str] = frozenset()
        self._inflight: Optional[asyncio.Future] = None
        self._log = logger.bind(session_id=self.session_id)
        ACTIVE_SESSIONS.inc()

    @property
    def items(self) -> List[EnrichedItem]:
        """Items currently displayed, oldest page first."""
        return list(self._items)

    @property
    def seen(self) -> FrozenSet[str]:
        return self._seen

    @property
    def is_loading(self) -> bool:
        return self.state is SessionState.LOADING

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    async def initialize(self) -> bool:
        """Load the first page. Only valid once, from the idle state."""
        if self.state is not SessionState.IDLE:
            if self.closed:
                raise SessionClosedError()
            if self._inflight is not None:
                return self._drop("initialize")
            self._log.warning("Feed session already initialized", state=self.state.value)
            return False
        return await self._run(SampleMode.REFRESH, "initialize")

    async def load_more(self) -> bool:
        """Append a page of unseen items, resetting the seen set on exhaustion."""
        return await self._run(SampleMode.APPEND, "load_more")

    async def refresh(self) -> bool:
        """Replace the list with a fresh random page and start a new seen set.

        The current list and seen set stay in place until the new page arrives,
        and are kept if the refresh fails.
        """
        return await self._run(SampleMode.REFRESH, "refresh")

    async def close(self) -> None:
        """End the session, cancelling any in-flight cycle."""
        if self.closed:
            return
        self.state = SessionState.CLOSED
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            inflight.cancel()
        self._items = []
        self._seen = frozenset()
        ACTIVE_SESSIONS.dec()
        self._log.info("Feed session closed")

    def _drop(self, operation: str) -> bool:
        DROPPED_CALLS.labels(operation=operation).inc()
        self._log.debug("Dropped call while loading", operation=operation)
        return False

    async def _run(self, mode: SampleMode, operation: str) -> bool:
        if self.closed:
            raise SessionClosedError()
        if self._inflight is not None:
            return self._drop(operation)

        previous_state = self.state
        seen = frozenset() if mode is SampleMode.REFRESH else self._seen
        self.state = SessionState.LOADING
        self.last_error = None
        self._inflight = asyncio.ensure_future(self.engine.sample(self.page_size, seen, mode))

        try:
            result = await self._inflight
        except asyncio.CancelledError:
            if self.closed:
                self._log.info("Discarded in-flight cycle", operation=operation)
                return False
            self.state = previous_state
            raise
        except FeedError as e:
            if self.closed:
                return False
            self.last_error = e
            self.state = SessionState.ERROR
            self._log.error(
                "Feed cycle failed",
                operation=operation,
                error=str(e),
                category=e.category.value,
                retryable=e.retryable,
            )
            return False
        except Exception:
            if not self.closed:
                self.state = previous_state
            raise
        finally:
            self._inflight = None

        if self.closed:
            self._log.info("Discarded in-flight cycle", operation=operation)
            return False

        if mode is SampleMode.REFRESH:
            self._items = list(result.items)
        else:
            self._items.extend(result.items)
        self._seen = result.seen
        self.state = SessionState.READY
        self._log.debug(
            "Feed cycle applied",
            operation=operation,
            added=len(result.items),
            total=len(self._items),
            exhausted=result.exhausted,
        )
        return True
