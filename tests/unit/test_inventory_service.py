"""Unit tests for the cached inventory query facade."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from fleet_governance.clients.cache import RedisCache
from fleet_governance.models import FilterConfig, PageResult, ResourceStatus
from fleet_governance.services.inventory_service import InventoryService


@pytest.fixture
def mock_cache():
    """A RedisCache double that always misses."""
    cache = MagicMock(spec=RedisCache)
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock(return_value=True)
    return cache


class TestWithoutCache:
    """Test direct computation."""

    async def test_query_page(self, resource_store):
        service = InventoryService(resource_store)
        page = await service.query_page(FilterConfig(statuses=[ResourceStatus.READY]), page_size=10)

        assert page.filtered_count == 2
        assert [row.resource.id for row in page.rows] == ["r3", "r4"]

    async def test_rejects_bad_page_size(self, resource_store):
        with pytest.raises(ValueError):
            await InventoryService(resource_store).query_page(FilterConfig(), page_size=0)

    async def test_facets(self, resource_store):
        facets = await InventoryService(resource_store).facets(FilterConfig())
        assert facets.status["READY"] == 2

    async def test_summary(self, resource_store):
        summary = await InventoryService(resource_store).summary()
        assert summary.total == 4


class TestWithCache:
    """Test memoization through Redis."""

    async def test_miss_computes_and_stores(self, resource_store, mock_cache):
        service = InventoryService(resource_store, cache=mock_cache, cache_ttl=60)

        page = await service.query_page(FilterConfig(), page_size=2)

        mock_cache.set.assert_awaited_once()
        key, value = mock_cache.set.await_args.args
        assert key.startswith("page:")
        assert value == page.model_dump(mode="json")
        assert mock_cache.set.await_args.kwargs["ttl"] == 60

    async def test_hit_returns_cached_model(self, resource_store, mock_cache):
        cached = PageResult(rows=[], page=1, page_size=5, total_pages=0, total_items=0, filtered_count=0)
        mock_cache.get.return_value = cached.model_dump(mode="json")
        service = InventoryService(resource_store, cache=mock_cache)

        result = await service.query_page(FilterConfig(), page_size=5)

        assert result == cached
        mock_cache.set.assert_not_awaited()

    async def test_malformed_cache_entry_is_recomputed(self, resource_store, mock_cache):
        mock_cache.get.return_value = {"status": "not-a-mapping"}
        service = InventoryService(resource_store, cache=mock_cache)

        facets = await service.facets(FilterConfig())

        assert facets.status["READY"] == 2
        mock_cache.set.assert_awaited_once()

    async def test_cache_key_changes_with_store_revision(self, resource_store, mock_cache):
        service = InventoryService(resource_store, cache=mock_cache)
        before = service._generate_cache_key("facets", {"q": 1})

        resource_store.apply_label_updates({"r4": {"env": "prod"}})

        assert service._generate_cache_key("facets", {"q": 1}) != before

    async def test_cache_key_is_deterministic(self, resource_store):
        service = InventoryService(resource_store)
        assert service._generate_cache_key("page", {"a": 1, "b": 2}) == service._generate_cache_key(
            "page", {"b": 2, "a": 1}
        )
