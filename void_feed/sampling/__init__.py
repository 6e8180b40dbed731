"""Random feed sampling."""

from .engine import SampleMode, SampleResult, SamplingEngine
from .shuffle import fisher_yates_shuffle

__all__ = ["SampleMode", "SampleResult", "SamplingEngine", "fisher_yates_shuffle"]
