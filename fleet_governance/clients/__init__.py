"""Clients for external collaborators."""

from .advisory_client import AdvisoryClient, AdvisoryError
from .cache import CacheError, RedisCache

__all__ = ["AdvisoryClient", "AdvisoryError", "CacheError", "RedisCache"]
