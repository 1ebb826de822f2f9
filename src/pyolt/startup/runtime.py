# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from dataclasses import dataclass

from pyolt.config.system_config_settings import OltConfigSettings
from pyolt.lib.cache.response_cache import JsonFileResponseCache, MemoryResponseCache, ResponseCache
from pyolt.lib.secret.credential_cipher import CredentialCipher
from pyolt.olt.device.device_registry import ConfigDeviceRegistry, DeviceRegistry
from pyolt.olt.history.onu_history import JsonFileOnuHistory, MemoryOnuHistory, OnuHistoryStore
from pyolt.olt.scraper.client_provider import OltClientProvider
from pyolt.olt.service.device_service import DeviceService
from pyolt.olt.service.onu_service import OnuService
from pyolt.olt.service.pon_service import PonService

logger = logging.getLogger(__name__)


@dataclass
class OltRuntime:
    """Wired service graph shared by the HTTP layer for the lifetime of the app."""
    settings: OltConfigSettings
    registry: DeviceRegistry
    clients: OltClientProvider
    cache: ResponseCache | None
    history: OnuHistoryStore | None
    pon_service: PonService
    onu_service: OnuService
    device_service: DeviceService

    @classmethod
    def build(cls, settings: OltConfigSettings,
              registry: DeviceRegistry | None = None,
              cache: ResponseCache | None = None,
              history: OnuHistoryStore | None = None) -> OltRuntime:
        """
        Assemble The Services From Configuration.

        ``registry``, ``cache`` and ``history`` override what the configuration
        would build, which is how tests inject fakes.
        """
        if registry is None:
            registry = ConfigDeviceRegistry(settings, CredentialCipher())
        if cache is None and settings.cache_enabled():
            cache = cls._build_cache(settings)
        if history is None and settings.history_enabled():
            history = cls._build_history(settings)

        ttl = settings.cache_ttl()
        max_workers = settings.scraper_max_workers()
        clients = OltClientProvider(registry, timeout=settings.scraper_timeout(), pool_size=max_workers)

        pon_service = PonService(clients, cache, ttl)
        return cls(
            settings        = settings,
            registry        = registry,
            clients         = clients,
            cache           = cache,
            history         = history,
            pon_service     = pon_service,
            onu_service     = OnuService(clients, cache, ttl, pon_service, max_workers, history=history),
            device_service  = DeviceService(clients, cache, ttl),
        )

    @staticmethod
    def _build_cache(settings: OltConfigSettings) -> ResponseCache:
        if settings.cache_backend() == "json":
            path = settings.cache_json_path()
            logger.info("Using JSON file response cache at %s", path)
            json_cache = JsonFileResponseCache(path)
            json_cache.purge_expired()
            return json_cache
        logger.info("Using in-memory response cache")
        return MemoryResponseCache()

    @staticmethod
    def _build_history(settings: OltConfigSettings) -> OnuHistoryStore:
        max_entries = settings.history_max_entries()
        if settings.history_backend() == "json":
            path = settings.history_json_path()
            logger.info("Using JSON file ONU history at %s", path)
            return JsonFileOnuHistory(path, max_entries=max_entries)
        logger.info("Using in-memory ONU history")
        return MemoryOnuHistory(max_entries=max_entries)

    def close(self) -> None:
        self.clients.close()
