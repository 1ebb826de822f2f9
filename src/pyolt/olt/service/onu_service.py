# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from pydantic import BaseModel, Field

from pyolt.lib.cache.cache_keys import CacheKeys
from pyolt.lib.cache.response_cache import ResponseCache
from pyolt.lib.constants import (
    BLANK_ONU_NAMES,
    DELETE_ONU_ENDPOINT,
    FALLBACK_ONU_NAME,
    FORM_CHECKED,
    FORM_DELETE_CHECK_PREFIX,
    FORM_ONU_ID,
    FORM_ONU_NAME,
    FORM_ONU_OPERATION,
    ONU_ACTION_OPERATION,
    ONU_DETAIL_ENDPOINT,
    ONU_LIST_ENDPOINT,
    PARAM_ONU_NO,
    PARAM_PON_NO,
    SET_ONU_ENDPOINT,
    OnuAction,
    OnuOperation,
)
from pyolt.lib.exceptions import UnsupportedActionError
from pyolt.lib.identifiers import OnuIdentifier, normalize_pon_id
from pyolt.lib.types import FormOperation, PonIdStr, TtlSeconds
from pyolt.olt.history.onu_history import DEFAULT_HISTORY_LIMIT, OnuHistoryStore, OnuLogEntry
from pyolt.olt.parser.model.records import OnuDetailModel, OnuSummaryModel, PonPortModel
from pyolt.olt.parser.olt_page_parser import OltPageParser
from pyolt.olt.scraper.client_provider import OltClientProvider
from pyolt.olt.scraper.olt_client import OltHttpClient
from pyolt.olt.scraper.worker_pool import BatchProcessor, WorkerPool
from pyolt.olt.service.pon_service import PonService
from pyolt.olt.service.service_base import OltServiceBase


class PonFetchErrorModel(BaseModel):
    pon_id: PonIdStr    = Field(..., description="Port That Could Not Be Read")
    error: str          = Field(..., description="Failure Reason")


class OnuInventoryModel(BaseModel):
    onus: list[OnuSummaryModel]         = Field(default_factory=list, description="ONUs Of Every Readable Port, In Port Order")
    errors: list[PonFetchErrorModel]    = Field(default_factory=list, description="Ports That Failed, In Port Order")
    pon_count: int                      = Field(0, description="Ports Listed By The Device")


class OnuService(OltServiceBase):
    """
    ONU Reads And Mutations.

    Reads are cached per port (``onus:<device>:<pon>``) and per unit
    (``onu-detail:<device>:<onu>``); every mutation invalidates both keys of
    the unit it touched. Ids are accepted in shorthand and normalized first.

    Every port list actually fetched from a device (cache hits excluded) is
    appended to the ONU history store when one is configured.
    """

    SUPPORTED_ACTIONS: str = ", ".join(action.value for action in OnuAction)

    def __init__(self, clients: OltClientProvider, cache: ResponseCache | None, ttl: TtlSeconds,
                 pon_service: PonService, max_workers: int,
                 parser: OltPageParser | None = None, history: OnuHistoryStore | None = None) -> None:
        super().__init__(clients, cache, ttl, parser)
        self._pon_service = pon_service
        self._max_workers = max_workers
        self._history = history

    @staticmethod
    def filter_by_status(onus: list[OnuSummaryModel], status: str | None) -> list[OnuSummaryModel]:
        """Keep units whose status matches ``status`` case-insensitively; empty keeps all."""
        if not status:
            return onus
        wanted = status.lower()
        return [onu for onu in onus if onu.status.lower() == wanted]

    def get_onus_by_pon(self, device_id: str, pon_id: str, status: str | None = None) -> list[OnuSummaryModel]:
        client = self._clients.get(device_id)
        onus = self._onus_for_pon(client, device_id, normalize_pon_id(pon_id))
        return self.filter_by_status(onus, status)

    def _onus_for_pon(self, client: OltHttpClient, device_id: str, pon_id: PonIdStr) -> list[OnuSummaryModel]:
        def load() -> list[OnuSummaryModel]:
            html = self._fetch(client, ONU_LIST_ENDPOINT, "ONU list", {PARAM_PON_NO: pon_id})
            onus = self._parser.parse_onu_list(html)
            self.logger.info("Fetched %d ONUs from device %s PON %s", len(onus), device_id, pon_id)
            self._record_history(device_id, onus)
            return onus

        return self._cached_list(CacheKeys.onus(device_id, pon_id), OnuSummaryModel, load)

    def _record_history(self, device_id: str, onus: list[OnuSummaryModel]) -> None:
        if self._history is None or not onus:
            return
        try:
            self._history.record(device_id, onus)
        except OSError as exc:
            self.logger.warning("Failed to record ONU history for device %s: %s", device_id, exc)

    def get_logs(self, device_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> list[OnuLogEntry]:
        """
        Recorded ONU Snapshots Of A Device, Newest First.

        A ``limit`` of zero or less means the default of 100.

        Raises:
            DeviceNotFoundError: If the device is not registered.
        """
        device = self._clients.device(device_id)
        if limit <= 0:
            limit = DEFAULT_HISTORY_LIMIT
        if self._history is None:
            return []
        return self._history.recent(device.id, limit)

    def get_all_onus(self, device_id: str, status: str | None = None) -> OnuInventoryModel:
        """
        ONUs Of Every PON Port, Fetched Concurrently.

        A port that fails is reported in ``errors`` and does not hide the
        units of the other ports.

        Raises:
            DeviceNotFoundError: If the device is not registered.
            RequestFailedError: If the PON list itself cannot be fetched.
        """
        pons = self._pon_service.get_pon_list(device_id)
        if not pons:
            return OnuInventoryModel()

        client = self._clients.get(device_id)

        def fetch(pon: PonPortModel) -> list[OnuSummaryModel]:
            return self._onus_for_pon(client, device_id, pon.full_id)

        with WorkerPool(min(self._max_workers, len(pons)), name=f"onus-{device_id}") as pool:
            results = BatchProcessor(pool).process(pons, fetch)

        inventory = OnuInventoryModel(pon_count=len(pons))
        for pon, result in zip(pons, results):
            if result.error is not None:
                self.logger.warning("Failed to fetch ONUs from device %s PON %s: %s",
                                    device_id, pon.full_id, result.error)
                inventory.errors.append(PonFetchErrorModel(pon_id=pon.full_id, error=str(result.error)))
                continue
            inventory.onus.extend(result.value or [])

        self.logger.info("Fetched %d total ONUs from device %s (%d/%d ports failed)",
                         len(inventory.onus), device_id, len(inventory.errors), len(pons))
        inventory.onus = self.filter_by_status(inventory.onus, status)
        return inventory

    def get_onu_detail(self, device_id: str, onu_id: str) -> OnuDetailModel:
        """
        Detail Page Of One ONU.

        Raises:
            InvalidIdentifierError: If ``onu_id`` is not ``port:index``.
            MalformedRecordError: If the page carries an incomplete ``onuinfo``.
        """
        ident = OnuIdentifier.parse(onu_id)
        client = self._clients.get(device_id)

        def load() -> OnuDetailModel:
            # The OLT expects the full id in onuno, not just the index
            html = self._fetch(client, ONU_DETAIL_ENDPOINT, "ONU detail",
                               {PARAM_PON_NO: ident.pon_id, PARAM_ONU_NO: ident.onu_id})
            return self._parser.parse_onu_detail(html)

        return self._cached_record(CacheKeys.onu_detail(device_id, ident.onu_id), OnuDetailModel, load)

    def update_onu_name(self, device_id: str, onu_id: str, name: str) -> OnuIdentifier:
        ident = OnuIdentifier.parse(onu_id)
        client = self._clients.get(device_id)

        body = self._submit(client, SET_ONU_ENDPOINT, "update ONU name", {
            PARAM_PON_NO:       ident.pon_id,
            FORM_ONU_ID:        ident.onu_id,
            FORM_ONU_NAME:      name,
            FORM_ONU_OPERATION: OnuOperation.RENAME.value,
        })
        self.logger.debug("Rename response for %s: %s", ident, body)

        self._invalidate_onu(device_id, ident)
        self.logger.info("Renamed device %s ONU %s to '%s'", device_id, ident, name)
        return ident

    @classmethod
    def operation_for(cls, action: str) -> FormOperation:
        """
        Form Operation For A User Action.

        Raises:
            UnsupportedActionError: If ``action`` is not one of the known actions.
        """
        try:
            return ONU_ACTION_OPERATION[OnuAction(action.strip().lower())]
        except ValueError:
            raise UnsupportedActionError(
                f"unsupported action: {action} (supported: {cls.SUPPORTED_ACTIONS})") from None

    def perform_action(self, device_id: str, onu_id: str, action: str) -> OnuIdentifier:
        """
        Run An Action On One ONU.

        The OLT form also rewrites the unit name, so the current name is read
        first and sent back unchanged.
        """
        ident = OnuIdentifier.parse(onu_id)
        operation = self.operation_for(action)

        detail = self.get_onu_detail(device_id, ident.onu_id)
        current_name = detail.name if detail.name not in BLANK_ONU_NAMES else FALLBACK_ONU_NAME

        client = self._clients.get(device_id)
        self._submit(client, SET_ONU_ENDPOINT, f"perform {action}", {
            FORM_ONU_ID:        ident.onu_id,
            FORM_ONU_NAME:      current_name,
            FORM_ONU_OPERATION: operation,
        })

        self._invalidate_onu(device_id, ident)
        self.logger.info("Performed %s on device %s ONU %s (preserved name: %s)",
                         action, device_id, ident, current_name)
        return ident

    def delete_onu(self, device_id: str, onu_id: str) -> OnuIdentifier:
        ident = OnuIdentifier.parse(onu_id)
        client = self._clients.get(device_id)

        self._submit(client, DELETE_ONU_ENDPOINT, "delete ONU", {
            f"{FORM_DELETE_CHECK_PREFIX}{ident.index}": FORM_CHECKED,
            FORM_ONU_ID:                                ident.onu_id,
        })

        self._invalidate_onu(device_id, ident)
        self.logger.info("Deleted ONU %s from device %s", ident, device_id)
        return ident

    def _invalidate_onu(self, device_id: str, ident: OnuIdentifier) -> None:
        self._invalidate(CacheKeys.onus(device_id, ident.pon_id),
                         CacheKeys.onu_detail(device_id, ident.onu_id))
