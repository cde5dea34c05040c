# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Service container for dependency wiring and lifecycle management.

This module provides a ServiceContainer that initializes and holds
all service instances. The container is protocol-agnostic: it can be
used by the HTTP server, a CLI tool or a test harness.
"""

import logging
import sqlite3
from typing import Optional

from .clients.advisory_client import AdvisoryClient
from .clients.cache import CacheError, RedisCache
from .config import Settings, settings as get_default_settings
from .models import LabelValidator
from .services.advisory_service import AdvisoryService
from .services.audit_service import AuditService
from .services.inventory_service import InventoryService
from .services.resource_store import InMemoryResourceStore
from .utils.label_validation import default_validator
from .utils.mock_fleet import generate_mock_resources

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Wires together all services with proper dependency injection.

    Usage::

        container = ServiceContainer()          # uses default settings
        await container.initialize()

        page = await container.inventory_service.query_page(config)

        await container.shutdown()

    Or with custom settings::

        container = ServiceContainer(settings=my_settings)
        await container.initialize()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        validator: Optional[LabelValidator] = None,
    ) -> None:
        """
        Create a ServiceContainer.

        Args:
            settings: Application settings. If None, loads from environment
                      variables / .env file via the default ``settings()`` helper.
            validator: Label syntax validator shared by the store and rule
                       validation. Defaults to Google Cloud label rules.
        """
        self._settings: Settings = settings or get_default_settings()
        self._validator: LabelValidator = validator or default_validator
        self._initialized = False

        # Service instances (populated by initialize())
        self._store: Optional[InMemoryResourceStore] = None
        self._redis_cache: Optional[RedisCache] = None
        self._audit_service: Optional[AuditService] = None
        self._inventory_service: Optional[InventoryService] = None
        self._advisory_service: Optional[AdvisoryService] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Initialize all services.

        Services are initialized in dependency order. The resource store is
        mandatory and its load errors propagate; the cache and audit log
        degrade to None so that partial startup is possible.

        Raises:
            InventoryNotFoundError: If the configured inventory file is missing
            InventoryValidationError: If the inventory file is malformed
        """
        if self._initialized:
            logger.warning("ServiceContainer.initialize() called more than once")
            return

        s = self._settings
        logger.info("ServiceContainer: initializing services")

        # 1. Resource store
        if s.inventory_path:
            self._store = InMemoryResourceStore.from_json_file(
                s.inventory_path, validator=self._validator
            )
        else:
            self._store = InMemoryResourceStore(
                generate_mock_resources(s.mock_fleet_size, seed=s.mock_fleet_seed),
                validator=self._validator,
            )
            logger.info(
                f"ServiceContainer: generated mock fleet of {len(self._store)} resources "
                f"(seed={s.mock_fleet_seed})"
            )

        # 2. Redis cache
        if s.redis_enabled:
            try:
                self._redis_cache = await RedisCache.create(
                    redis_url=s.redis_url, default_ttl=s.redis_ttl
                )
                logger.info("ServiceContainer: Redis cache initialized")
            except CacheError as e:
                logger.warning(f"ServiceContainer: failed to initialize Redis cache: {e}")
                self._redis_cache = None
        else:
            logger.info("ServiceContainer: Redis cache is disabled")

        # 3. Audit service (SQLite)
        try:
            self._audit_service = AuditService(db_path=s.audit_db_path)
            logger.info(f"ServiceContainer: audit service initialized (db={s.audit_db_path})")
        except sqlite3.Error as e:
            logger.error(f"ServiceContainer: failed to initialize audit service: {e}")
            self._audit_service = None

        # 4. Inventory queries
        self._inventory_service = InventoryService(
            store=self._store,
            cache=self._redis_cache,
            cache_ttl=s.redis_ttl,
        )

        # 5. Naming advisory
        advisory_client = None
        if s.advisory_url:
            advisory_client = AdvisoryClient(
                url=s.advisory_url,
                timeout=s.advisory_timeout_seconds,
                api_key=s.advisory_api_key,
            )
            logger.info(f"ServiceContainer: naming advisory endpoint {s.advisory_url}")
        else:
            logger.info("ServiceContainer: naming advisory uses the local heuristic")
        self._advisory_service = AdvisoryService(client=advisory_client)

        self._initialized = True
        logger.info("ServiceContainer: all services initialized")

    async def shutdown(self) -> None:
        """Clean up connections and resources."""
        logger.info("ServiceContainer: shutting down")

        if self._redis_cache:
            await self._redis_cache.close()

        if self._advisory_service and self._advisory_service.client:
            self._advisory_service.client.session.close()

        self._initialized = False
        logger.info("ServiceContainer: shutdown complete")

    # ------------------------------------------------------------------
    # Accessor properties
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def validator(self) -> LabelValidator:
        return self._validator

    @property
    def store(self) -> Optional[InMemoryResourceStore]:
        return self._store

    @property
    def redis_cache(self) -> Optional[RedisCache]:
        return self._redis_cache

    @property
    def audit_service(self) -> Optional[AuditService]:
        return self._audit_service

    @property
    def inventory_service(self) -> Optional[InventoryService]:
        return self._inventory_service

    @property
    def advisory_service(self) -> Optional[AdvisoryService]:
        return self._advisory_service
