# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TypeVar, cast

from pydantic import BaseModel, TypeAdapter, ValidationError

from pyolt.lib.cache.response_cache import ResponseCache
from pyolt.lib.exceptions import RequestFailedError
from pyolt.lib.types import CacheKey, CachePayload, HtmlStr, TtlSeconds
from pyolt.olt.parser.olt_page_parser import OltPageParser
from pyolt.olt.scraper.client_provider import OltClientProvider
from pyolt.olt.scraper.olt_client import OltHttpClient

M = TypeVar("M", bound=BaseModel)


class OltServiceBase:
    """
    Shared plumbing for the OLT services: client lookup, page parsing and
    read-through caching of parsed records.

    Passing ``cache=None`` disables caching entirely.
    """

    def __init__(self, clients: OltClientProvider, cache: ResponseCache | None,
                 ttl: TtlSeconds, parser: OltPageParser | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._clients = clients
        self._cache = cache
        self._ttl = ttl
        self._parser = parser if parser is not None else OltPageParser()

    def _cached_list(self, key: CacheKey, model: type[M], load: Callable[[], list[M]]) -> list[M]:
        """
        Read-Through Cache For A List Of Records.

        Empty results are not cached, so a port that momentarily reports no
        units is asked again on the next call.
        """
        adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
        if self._cache is not None:
            payload = self._cache.get(key)
            if payload is not None:
                try:
                    records = cast(list[M], adapter.validate_json(payload))
                    self.logger.debug("Cache hit for %s", key)
                    return records
                except ValidationError as err:
                    self.logger.warning("Discarding unreadable cache entry %s: %s", key, err)

        records = load()
        if self._cache is not None and records:
            self._cache.set(key, cast(CachePayload, adapter.dump_json(records).decode("utf-8")), self._ttl)
        return records

    def _cached_record(self, key: CacheKey, model: type[M], load: Callable[[], M]) -> M:
        if self._cache is not None:
            payload = self._cache.get(key)
            if payload is not None:
                try:
                    record = model.model_validate_json(payload)
                    self.logger.debug("Cache hit for %s", key)
                    return record
                except ValidationError as err:
                    self.logger.warning("Discarding unreadable cache entry %s: %s", key, err)

        record = load()
        if self._cache is not None:
            self._cache.set(key, cast(CachePayload, record.model_dump_json()), self._ttl)
        return record

    @staticmethod
    def _fetch(client: OltHttpClient, endpoint: str, what: str,
               params: Mapping[str, str] | None = None) -> HtmlStr:
        try:
            return client.get(endpoint, params)
        except RequestFailedError as exc:
            raise RequestFailedError(f"failed to fetch {what}: {exc}", status_code=exc.status_code) from exc

    @staticmethod
    def _submit(client: OltHttpClient, endpoint: str, what: str,
                form: Mapping[str, str] | None = None) -> HtmlStr:
        try:
            return client.post(endpoint, form)
        except RequestFailedError as exc:
            raise RequestFailedError(f"failed to {what}: {exc}", status_code=exc.status_code) from exc

    def _invalidate(self, *keys: CacheKey) -> None:
        if self._cache is None:
            return
        for key in keys:
            self._cache.invalidate(key)
