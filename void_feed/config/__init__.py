"""Configuration management for void feed components."""

from .backend_config import BackendConfig
from .feed_config import FeedConfig

__all__ = ["BackendConfig", "FeedConfig"]
