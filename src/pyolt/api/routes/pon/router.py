# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from enum import Enum

from fastapi import APIRouter, Depends, Query

from pyolt.api.routes.common.dependencies import get_onu_service, get_pon_service
from pyolt.api.routes.common.envelope import ApiResponse, success
from pyolt.olt.service.onu_service import OnuService
from pyolt.olt.service.pon_service import PonService


class PonRouter:
    """
    PON port endpoints:
      - GET /api/v1/devices/{device_id}/pons
      - GET /api/v1/devices/{device_id}/pons/{pon_id}/onus?filter=online
    """
    def __init__(self, prefix: str = "/api/v1/devices", tags: list[str | Enum] | None = None) -> None:
        if tags is None:
            tags = ["OLT PON Ports"]
        self.router = APIRouter(prefix=prefix, tags=tags)
        self.logger = logging.getLogger(__name__)
        self._register_routes()

    def _register_routes(self) -> None:
        @self.router.get("/{device_id}/pons", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="List PON Ports")
        def list_pons(device_id: str, service: PonService = Depends(get_pon_service)) -> ApiResponse:
            pons = service.get_pon_list(device_id)
            return success([pon.model_dump(mode="json") for pon in pons], device_id=device_id)

        @self.router.get("/{device_id}/pons/{pon_id:path}/onus", response_model=ApiResponse,
                         response_model_exclude_none=True, summary="List ONUs Of One PON Port")
        def list_pon_onus(device_id: str, pon_id: str,
                          status_filter: str = Query("", alias="filter", description="online, offline, poweroff..."),
                          service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            """``pon_id`` accepts ``0/1`` or the shorthand ``1``."""
            onus = service.get_onus_by_pon(device_id, pon_id, status_filter)
            return success([onu.model_dump(mode="json") for onu in onus], device_id=device_id)


router = PonRouter().router
