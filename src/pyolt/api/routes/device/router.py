# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from enum import Enum

from fastapi import APIRouter, Depends, Query

from pyolt.api.routes.common.dependencies import get_device_service, get_onu_service
from pyolt.api.routes.common.envelope import ApiResponse, success
from pyolt.olt.history.onu_history import DEFAULT_HISTORY_LIMIT
from pyolt.olt.service.device_service import DeviceService
from pyolt.olt.service.onu_service import OnuService


class DeviceRouter:
    """
    Device-level endpoints:
      - GET  /api/v1/devices                      : registered devices
      - GET  /api/v1/devices/{device_id}          : one registered device
      - GET  /api/v1/devices/{device_id}/status   : reachability probe
      - GET  /api/v1/devices/{device_id}/system   : system page
      - POST /api/v1/devices/{device_id}/save-config
      - GET  /api/v1/devices/{device_id}/logs     : ONU history, newest first
    """
    def __init__(self, prefix: str = "/api/v1/devices", tags: list[str | Enum] | None = None) -> None:
        if tags is None:
            tags = ["OLT Devices"]
        self.router = APIRouter(prefix=prefix, tags=tags)
        self.logger = logging.getLogger(__name__)
        self._register_routes()

    def _register_routes(self) -> None:
        @self.router.get("", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="List Registered Devices")
        def list_devices(service: DeviceService = Depends(get_device_service)) -> ApiResponse:
            """Devices declared in system.json. Passwords are never returned."""
            devices = service.list_devices()
            return success([device.model_dump(mode="json") for device in devices])

        @self.router.get("/{device_id}", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="Read One Registered Device")
        def get_device(device_id: str, service: DeviceService = Depends(get_device_service)) -> ApiResponse:
            device = service.get_device(device_id)
            return success(device.model_dump(mode="json"), device_id=device_id)

        @self.router.get("/{device_id}/status", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="Probe Device Reachability")
        def device_status(device_id: str, service: DeviceService = Depends(get_device_service)) -> ApiResponse:
            status = service.check_status(device_id)
            return success(status.model_dump(mode="json"), device_id=device_id)

        @self.router.get("/{device_id}/system", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="Read OLT System Information")
        def system_info(device_id: str, service: DeviceService = Depends(get_device_service)) -> ApiResponse:
            self.logger.info("Retrieving system info for device %s", device_id)
            info = service.get_system_info(device_id)
            return success(info.model_dump(mode="json"), device_id=device_id)

        @self.router.post("/{device_id}/save-config", response_model=ApiResponse, response_model_exclude_none=True,
                          summary="Persist OLT Running Configuration")
        def save_config(device_id: str, service: DeviceService = Depends(get_device_service)) -> ApiResponse:
            service.save_config(device_id)
            return success(device_id=device_id, message="Configuration saved successfully")

        @self.router.get("/{device_id}/logs", response_model=ApiResponse, response_model_exclude_none=True,
                         summary="Read ONU History")
        def onu_logs(device_id: str,
                     limit: int = Query(DEFAULT_HISTORY_LIMIT, description="Maximum entries; 0 or less means 100"),
                     service: OnuService = Depends(get_onu_service)) -> ApiResponse:
            """Snapshots recorded each time a PON port was read from the device."""
            logs = service.get_logs(device_id, limit)
            return success([entry.model_dump(mode="json") for entry in logs], device_id=device_id)


router = DeviceRouter().router
