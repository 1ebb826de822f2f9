# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from pyolt.lib.cache.cache_keys import CacheKeys
from pyolt.lib.constants import PON_LIST_ENDPOINT
from pyolt.olt.parser.model.records import PonPortModel
from pyolt.olt.service.service_base import OltServiceBase


class PonService(OltServiceBase):
    """PON port listing."""

    def get_pon_list(self, device_id: str) -> list[PonPortModel]:
        """
        PON Ports Of A Device, Cached Under ``pons:<device>``.

        Raises:
            DeviceNotFoundError: If the device is not registered.
            RequestFailedError: If the page cannot be fetched.
            NotFoundError: If the page carries no ``ponListTable``.
        """
        client = self._clients.get(device_id)

        def load() -> list[PonPortModel]:
            html = self._fetch(client, PON_LIST_ENDPOINT, "PON list")
            pons = self._parser.parse_pon_list(html)
            self.logger.info("Fetched %d PON ports from device %s", len(pons), device_id)
            return pons

        return self._cached_list(CacheKeys.pons(device_id), PonPortModel, load)
