# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
import threading

from pyolt.lib.types import DeviceId
from pyolt.olt.device.device_model import DeviceDescriptor
from pyolt.olt.device.device_registry import DeviceRegistry
from pyolt.olt.scraper.olt_client import OltHttpClient


class OltClientProvider:
    """
    Hands out one ``OltHttpClient`` per device so pooled connections are
    reused across requests and across the workers of a batch.

    A client is rebuilt when the device's address or credentials change in
    the registry.
    """

    def __init__(self, registry: DeviceRegistry, timeout: float, pool_size: int) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._registry = registry
        self._timeout = timeout
        self._pool_size = pool_size
        self._clients: dict[DeviceId, tuple[tuple[str, str, str], OltHttpClient]] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> DeviceRegistry:
        return self._registry

    def device(self, device_id: str) -> DeviceDescriptor:
        return self._registry.get(device_id)

    def client_for(self, device: DeviceDescriptor) -> OltHttpClient:
        fingerprint = (device.endpoint_url, device.username, device.password)
        with self._lock:
            cached = self._clients.get(device.id)
            if cached is not None and cached[0] == fingerprint:
                return cached[1]
            if cached is not None:
                cached[1].close()

            client = OltHttpClient(device.endpoint_url, device.username, device.password,
                                   timeout=self._timeout, pool_size=self._pool_size)
            self._clients[device.id] = (fingerprint, client)
            self.logger.debug("Created HTTP client for device %s at %s", device.id, device.endpoint_url)
            return client

    def get(self, device_id: str) -> OltHttpClient:
        """
        Client For A Registered Device.

        Raises:
            DeviceNotFoundError: If the device is not registered.
        """
        return self.client_for(self.device(device_id))

    def close(self) -> None:
        with self._lock:
            clients = [client for _, client in self._clients.values()]
            self._clients.clear()
        for client in clients:
            client.close()
