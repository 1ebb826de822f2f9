# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from pyolt.config.system_config_settings import OltConfigSettings
from pyolt.lib.exceptions import DeviceNotFoundError
from pyolt.lib.secret.credential_cipher import CredentialCipher
from pyolt.olt.device.device_model import DeviceDescriptor


class DeviceRegistry(Protocol):
    """Read-only source of device descriptors."""

    def list_devices(self) -> list[DeviceDescriptor]: ...

    def get(self, device_id: str) -> DeviceDescriptor: ...


class ConfigDeviceRegistry:
    """
    Device Registry Backed By The ``Devices`` List In system.json.

    Entries are re-read on every call so a configuration reload is picked up
    without restarting. Encrypted ``password_enc`` values are only decrypted
    when a single device is resolved for use.
    """

    def __init__(self, settings: OltConfigSettings, cipher: CredentialCipher | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._settings = settings
        self._cipher = cipher if cipher is not None else CredentialCipher()

    def list_devices(self) -> list[DeviceDescriptor]:
        """All valid devices, passwords left unresolved."""
        devices: list[DeviceDescriptor] = []
        for entry in self._settings.device_entries():
            device = self._build(entry, password="")
            if device is not None:
                devices.append(device)
        return devices

    def get(self, device_id: str) -> DeviceDescriptor:
        """
        Resolve One Device With Its Usable Password.

        Raises:
            DeviceNotFoundError: If no valid entry carries ``device_id``.
            SecretCryptoError: If the stored ``password_enc`` cannot be decrypted.
        """
        for entry in self._settings.device_entries():
            if str(entry.get("id", "")) != device_id:
                continue
            device = self._build(entry, password=self._password(entry))
            if device is not None:
                return device
        raise DeviceNotFoundError(f"device '{device_id}' not found")

    def _password(self, entry: dict[str, Any]) -> str:
        password_enc = str(entry.get("password_enc") or "").strip()
        if password_enc:
            return self._cipher.decrypt(password_enc)

        password = str(entry.get("password") or "")
        if CredentialCipher.is_encrypted(password):
            return self._cipher.decrypt(password)
        return password

    def _build(self, entry: dict[str, Any], password: str) -> DeviceDescriptor | None:
        fields = {k: v for k, v in entry.items() if k not in ("password", "password_enc")}
        try:
            return DeviceDescriptor.model_validate({**fields, "password": password})
        except ValidationError as err:
            self.logger.error("Skipping invalid device entry '%s': %s", entry.get("id", "?"), err)
            return None
