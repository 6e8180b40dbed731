"""Configuration settings for feed sampling."""

from dataclasses import dataclass
from typing import Any, Dict

from void_feed.core.errors import ConfigurationError


@dataclass
class FeedConfig:
    """Configuration for the sampling engine and feed sessions.

    Attributes:
        page_size: Number of items returned per page
        oversample_factor: Multiple of page_size requested from the store per cycle
        visibility_mode: Visibility category of discoverable items
    """

    page_size: int = 20
    oversample_factor: float = 2.0
    visibility_mode: str = "void"

    def __post_init__(self):
        if self.page_size < 1:
            raise ConfigurationError(
                "page_size must be at least 1", details={"page_size": self.page_size}
            )
        # Below 1x a small pool could never fill a page.
        if self.oversample_factor < 1:
            raise ConfigurationError(
                "oversample_factor must be at least 1",
                details={"oversample_factor": self.oversample_factor},
            )
        if not self.visibility_mode:
            raise ConfigurationError("visibility_mode must not be empty")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "FeedConfig":
        """Create a FeedConfig instance from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values

        Returns:
            FeedConfig instance with values from dictionary
        """
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__})
