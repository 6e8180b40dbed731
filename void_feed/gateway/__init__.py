"""Gateways to the content store and identity service."""

from .base import RECENCY_DESC, CandidateFilter, ContentStoreGateway, IdentityResolver
from .memory import InMemoryContentStore, InMemoryIdentityResolver, load_fixture
from .rest import RestClient, RestContentStore, RestIdentityResolver

__all__ = [
    "RECENCY_DESC",
    "CandidateFilter",
    "ContentStoreGateway",
    "IdentityResolver",
    "InMemoryContentStore",
    "InMemoryIdentityResolver",
    "RestClient",
    "RestContentStore",
    "RestIdentityResolver",
    "load_fixture",
]
