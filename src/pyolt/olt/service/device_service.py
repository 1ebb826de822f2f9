# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from pyolt.lib.constants import SAVE_CONFIG_ENDPOINT, SYSTEM_ENDPOINT
from pyolt.lib.exceptions import RequestFailedError
from pyolt.lib.types import DeviceId, UrlStr
from pyolt.olt.device.device_model import DeviceDescriptor
from pyolt.olt.parser.model.records import SystemInfoModel
from pyolt.olt.service.service_base import OltServiceBase


class DeviceStatusModel(BaseModel):
    device_id: DeviceId     = Field(..., description="Device Id")
    name: str               = Field("", description="Display Name")
    base_url: UrlStr        = Field(..., description="URL That Was Probed")
    reachable: bool         = Field(False, description="True When The Probe Succeeded")
    checked_at: datetime    = Field(..., description="Probe Time (UTC)")
    error: str | None       = Field(None, description="Failure Reason When Unreachable")


class DeviceService(OltServiceBase):
    """Device-level operations: inventory, reachability, system page, save-config."""

    def list_devices(self) -> list[DeviceDescriptor]:
        return self._clients.registry.list_devices()

    def get_device(self, device_id: str) -> DeviceDescriptor:
        """
        Registered Device By Id. The password is never part of the model dump.

        Raises:
            DeviceNotFoundError: If the device is not registered.
        """
        return self._clients.device(device_id)

    def check_status(self, device_id: str) -> DeviceStatusModel:
        """
        Probe A Device With Its Stored Credentials.

        Probe failures, authentication included, are reported in the returned
        model rather than raised.

        Raises:
            DeviceNotFoundError: If the device is not registered.
        """
        device = self._clients.device(device_id)
        client = self._clients.client_for(device)

        status = DeviceStatusModel(device_id=device.id, name=device.name, base_url=device.endpoint_url,
                                   checked_at=datetime.now(timezone.utc))
        try:
            client.check_connection()
        except RequestFailedError as exc:
            self.logger.warning("Device %s unreachable: %s", device_id, exc)
            return status.model_copy(update={"error": str(exc)})

        return status.model_copy(update={"reachable": True})

    def get_system_info(self, device_id: str) -> SystemInfoModel:
        """
        Parse The System Page. Not cached.

        Raises:
            MalformedRecordError: If ``sysInfo`` has fewer than 13 fields.
        """
        client = self._clients.get(device_id)
        html = self._fetch(client, SYSTEM_ENDPOINT, "system info")
        return self._parser.parse_system_info(html)

    def save_config(self, device_id: str) -> None:
        """Ask the OLT to persist its running configuration."""
        client = self._clients.get(device_id)
        self._submit(client, SAVE_CONFIG_ENDPOINT, "save config")
        self.logger.info("Saved config on device %s", device_id)
