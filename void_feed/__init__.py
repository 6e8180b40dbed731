"""Random discovery feed sampling."""

from .config import BackendConfig, FeedConfig
from .core.errors import (
    FeedError,
    ResolverUnavailable,
    SessionClosedError,
    StoreQueryError,
    StoreUnavailable,
)
from .core.session import FeedSession, SessionState
from .models import AuthorSummary, EnrichedItem, Item
from .sampling import SampleMode, SampleResult, SamplingEngine, fisher_yates_shuffle

__version__ = "1.0.0"

__all__ = [
    "AuthorSummary",
    "BackendConfig",
    "EnrichedItem",
    "FeedConfig",
    "FeedError",
    "FeedSession",
    "Item",
    "ResolverUnavailable",
    "SampleMode",
    "SampleResult",
    "SamplingEngine",
    "SessionClosedError",
    "SessionState",
    "StoreQueryError",
    "StoreUnavailable",
    "fisher_yates_shuffle",
]
