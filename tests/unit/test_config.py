"""Tests for configuration objects."""

import pytest
from pydantic import ValidationError

from void_feed.config import BackendConfig, FeedConfig
from void_feed.core.errors import ConfigurationError


def test_feed_config_defaults():
    config = FeedConfig()

    assert config.page_size == 20
    assert config.oversample_factor == 2.0
    assert config.visibility_mode == "void"


def test_feed_config_from_dict_ignores_unknown_keys():
    config = FeedConfig.from_dict({"page_size": 5, "oversample_factor": 3, "theme": "dark"})

    assert config.page_size == 5
    assert config.oversample_factor == 3


@pytest.mark.parametrize(
    "values",
    [{"page_size": 0}, {"oversample_factor": 0.5}, {"visibility_mode": ""}],
)
def test_feed_config_rejects_invalid_values(values):
    with pytest.raises(ConfigurationError):
        FeedConfig(**values)


def test_backend_config_defaults():
    config = BackendConfig(base_url="https://db.test/rest/v1", api_key="anon")

    assert config.items_table == "memos"
    assert config.profiles_table == "profiles"
    assert config.max_retries == 3


def test_backend_config_requires_positive_timeout():
    with pytest.raises(ValidationError):
        BackendConfig(base_url="https://db.test", api_key="anon", timeout=0)
