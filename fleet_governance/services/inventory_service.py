# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Cached query facade over the resource store.

Table pages, facet counts and the fleet summary are memoized in Redis
under keys derived from the store revision and the query parameters, so
any label mutation naturally invalidates earlier results.
"""

import hashlib
import json
import logging
from collections.abc import Collection
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..clients.cache import RedisCache
from ..models import FacetCounts, FilterConfig, FleetSummary, PageResult
from .analytics_service import summarize_fleet
from .facet_service import compute_facets
from .resource_store import InMemoryResourceStore
from .table_service import DEFAULT_PAGE_SIZE, filter_sort_paginate_group

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class InventoryService:
    """
    Answers table, facet and summary queries for the current inventory.

    The cache is optional; without one every query is computed directly.
    """

    def __init__(
        self,
        store: InMemoryResourceStore,
        cache: Optional[RedisCache] = None,
        cache_ttl: int = 300,
    ):
        """
        Initialize the InventoryService.

        Args:
            store: Authoritative resource store
            cache: Optional Redis cache for query results
            cache_ttl: Cache TTL in seconds
        """
        self.store = store
        self.cache = cache
        self.cache_ttl = cache_ttl

    def _generate_cache_key(self, prefix: str, query: dict[str, Any]) -> str:
        """
        Generate a deterministic cache key from the store revision and query.

        Returns:
            ``<prefix>:<sha256 of normalized parameters>``
        """
        normalized = {"revision": self.store.revision, "query": query}
        json_str = json.dumps(normalized, sort_keys=True, default=str)
        hash_obj = hashlib.sha256(json_str.encode())
        return f"{prefix}:{hash_obj.hexdigest()}"

    async def _get_from_cache(self, cache_key: str, model: type[ModelT]) -> ModelT | None:
        if self.cache is None:
            return None

        cached_data = await self.cache.get(cache_key)
        if cached_data is None:
            return None

        try:
            return model.model_validate(cached_data)
        except ValidationError as e:
            logger.warning(f"Discarding malformed cache entry {cache_key}: {e}")
            return None

    async def _cache_result(self, cache_key: str, result: BaseModel) -> None:
        if self.cache is None:
            return
        await self.cache.set(cache_key, result.model_dump(mode="json"), ttl=self.cache_ttl)

    async def query_page(
        self,
        config: FilterConfig,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        collapsed_groups: Collection[str] = (),
    ) -> PageResult:
        """
        Compute one page of the filtered, sorted and grouped table.

        Raises:
            ValueError: If page_size is less than 1
        """
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")

        cache_key = self._generate_cache_key(
            "page",
            {
                "config": config.model_dump(mode="json"),
                "page": page,
                "page_size": page_size,
                "collapsed": sorted(collapsed_groups),
            },
        )
        cached = await self._get_from_cache(cache_key, PageResult)
        if cached is not None:
            logger.info(f"Returning cached page for key: {cache_key}")
            return cached

        result = filter_sort_paginate_group(
            self.store.list_resources(),
            config,
            page=page,
            page_size=page_size,
            collapsed_groups=collapsed_groups,
        )
        await self._cache_result(cache_key, result)
        return result

    async def facets(self, config: FilterConfig) -> FacetCounts:
        """Compute facet counts for the active filter."""
        cache_key = self._generate_cache_key("facets", {"config": config.model_dump(mode="json")})
        cached = await self._get_from_cache(cache_key, FacetCounts)
        if cached is not None:
            logger.info(f"Returning cached facets for key: {cache_key}")
            return cached

        result = compute_facets(self.store.list_resources(), config)
        await self._cache_result(cache_key, result)
        return result

    async def summary(self) -> FleetSummary:
        """Compute the fleet dashboard summary."""
        cache_key = self._generate_cache_key("summary", {})
        cached = await self._get_from_cache(cache_key, FleetSummary)
        if cached is not None:
            return cached

        result = summarize_fleet(self.store.list_resources())
        await self._cache_result(cache_key, result)
        return result
