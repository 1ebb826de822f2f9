# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from enum import Enum

from fastapi import APIRouter, Depends, Query

from pyolt.api.routes.common.dependencies import get_onu_service
from pyolt.api.routes.common.envelope import ApiResponse, success
from pyolt.api.routes.onu.schemas import OnuActionRequest, OnuRenameRequest
from pyolt.olt.service.onu_service import OnuService


class OnuRouter:
    """
    ONU endpoints. ``onu_id`` accepts ``0/1:8`` or the shorthand ``1:8``:
      - GET    /api/v1/devices/{device_id}/onus?filter=online : every port, fetched concurrently
      - GET    /api/v1/devices/{device_id}/onus/{onu_id}      : detail page
      - PUT    /api/v1/devices/{device_id}/onus/{onu_id}      : rename
      - POST   /api/v1/devices/{device_id}/onus/{onu_id}/action
      - DELETE /api/v1/devices/{device_id}/onus/{onu_id}
    """
    def __init__(self, prefix: str = "/api/v1/devices", tags: list[str | Enum] | None = None) -> None:
        if tags is None:
            tags = ["OLT ONUs"]
        self.router = APIRouter(prefix=prefix, tags=tags)
        self.logger = logging.getLogger(__name__)
        self._register_routes()

    def _register_routes(self) -> None:
        @self.router.get("/{device_id}/onus", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="List ONUs Of Every PON Port")
        def list_all_onus(device_id: str,
                          status_filter: str = Query("", alias="filter", description="online, offline, poweroff..."),
                          service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            """
            Ports are read concurrently. Ports that fail are listed under
            ``errors`` while the ONUs of the other ports are still returned.
            """
            inventory = service.get_all_onus(device_id, status_filter)
            message = None
            if inventory.errors:
                message = f"{len(inventory.errors)} of {inventory.pon_count} PON ports could not be read"
            return success(inventory.model_dump(mode="json"), device_id=device_id, message=message)

        # Registered before the detail route so '/action' is not swallowed by the path converter
        @self.router.post("/{device_id}/onus/{onu_id:path}/action", response_model=ApiResponse,
                          response_model_exclude_none=True, summary="Run An ONU Action")
        def onu_action(device_id: str, onu_id: str, request: OnuActionRequest,
                       service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            ident = service.perform_action(device_id, onu_id, request.action)
            return success({"device_id": device_id, "onu_id": ident.onu_id, "action": request.action},
                           device_id=device_id, message=f"Action '{request.action}' performed successfully")

        @self.router.get("/{device_id}/onus/{onu_id:path}", response_model=ApiResponse,
                         response_model_exclude_none=True, summary="Read ONU Detail")
        def onu_detail(device_id: str, onu_id: str, service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            detail = service.get_onu_detail(device_id, onu_id)
            return success(detail.model_dump(mode="json"), device_id=device_id)

        @self.router.put("/{device_id}/onus/{onu_id:path}", response_model=ApiResponse,
                         response_model_exclude_none=True, summary="Rename An ONU")
        def rename_onu(device_id: str, onu_id: str, request: OnuRenameRequest,
                       service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            ident = service.update_onu_name(device_id, onu_id, request.name)
            return success({"device_id": device_id, "onu_id": ident.onu_id, "name": request.name},
                           device_id=device_id, message="ONU name updated successfully")

        @self.router.delete("/{device_id}/onus/{onu_id:path}", response_model=ApiResponse,
                            response_model_exclude_none=True, summary="Delete An ONU")
        def delete_onu(device_id: str, onu_id: str, service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            service.delete_onu(device_id, onu_id)
            return success(device_id=device_id, message="ONU deleted successfully")


router = OnuRouter().router
