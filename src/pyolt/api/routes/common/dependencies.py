# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from fastapi import Request

from pyolt.olt.service.device_service import DeviceService
from pyolt.olt.service.onu_service import OnuService
from pyolt.olt.service.pon_service import PonService
from pyolt.startup.runtime import OltRuntime


def get_runtime(request: Request) -> OltRuntime:
    return request.app.state.runtime


def get_device_service(request: Request) -> DeviceService:
    return get_runtime(request).device_service


def get_pon_service(request: Request) -> PonService:
    return get_runtime(request).pon_service


def get_onu_service(request: Request) -> OnuService:
    return get_runtime(request).onu_service
