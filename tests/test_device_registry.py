# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from pyolt.config.config_manager import ConfigManager
from pyolt.config.system_config_settings import OltConfigSettings
from pyolt.lib.exceptions import DeviceNotFoundError
from pyolt.lib.secret.credential_cipher import CredentialCipher, SecretCryptoError
from pyolt.olt.device.device_model import DeviceDescriptor
from pyolt.olt.device.device_registry import ConfigDeviceRegistry
from pyolt.olt.scraper.client_provider import OltClientProvider


@pytest.fixture()
def cipher(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CredentialCipher:
    monkeypatch.setenv(CredentialCipher.ENV_VAR_NAME, CredentialCipher.generate_key())
    return CredentialCipher(key_path=tmp_path / "missing.key")


def _write_config(path: Path, devices: list[Any]) -> Path:
    path.write_text(json.dumps({"Devices": devices}), encoding="utf-8")
    return path


def _registry(tmp_path: Path, devices: list[Any], cipher: CredentialCipher) -> ConfigDeviceRegistry:
    cfg = ConfigManager(_write_config(tmp_path / "system.json", devices))
    return ConfigDeviceRegistry(OltConfigSettings(cfg), cipher=cipher)


@pytest.mark.parametrize(
    ("base_url", "port", "expected"),
    [
        ("http://10.0.0.2", 8080, "http://10.0.0.2:8080"),
        ("http://10.0.0.2", 80, "http://10.0.0.2"),
        ("http://10.0.0.2/", 0, "http://10.0.0.2"),
    ],
)
def test_endpoint_url_port_rule(base_url: str, port: int, expected: str) -> None:
    device = DeviceDescriptor(id="olt-1", base_url=base_url, port=port)

    assert device.endpoint_url == expected


def test_password_is_never_serialized() -> None:
    device = DeviceDescriptor(id="olt-1", base_url="http://10.0.0.2", password="secret")

    assert "password" not in device.model_dump()
    assert "secret" not in repr(device)


def test_list_devices_skips_invalid_entries(tmp_path: Path, cipher: CredentialCipher) -> None:
    registry = _registry(tmp_path, [
        {"id": "olt-1", "name": "Core", "base_url": "http://10.0.0.1", "password": "pw"},
        {"id": "", "base_url": "http://10.0.0.9"},
        {"id": "olt-2", "base_url": "http://10.0.0.2", "port": 99999},
        {"id": "olt-3", "base_url": "http://10.0.0.3", "password_enc": "ENC[v1]:garbage"},
    ], cipher)

    devices = registry.list_devices()

    assert [d.id for d in devices] == ["olt-1", "olt-3"]
    assert all(d.password == "" for d in devices)


def test_get_returns_plaintext_password(tmp_path: Path, cipher: CredentialCipher) -> None:
    registry = _registry(tmp_path, [
        {"id": "olt-1", "base_url": "http://10.0.0.1", "username": "admin", "password": "pw"},
    ], cipher)

    device = registry.get("olt-1")

    assert device.username == "admin"
    assert device.password == "pw"


def test_get_decrypts_password_enc(tmp_path: Path, cipher: CredentialCipher) -> None:
    registry = _registry(tmp_path, [
        {"id": "olt-1", "base_url": "http://10.0.0.1", "password_enc": cipher.encrypt("s3cret")},
    ], cipher)

    assert registry.get("olt-1").password == "s3cret"


def test_get_decrypts_encrypted_password_field(tmp_path: Path, cipher: CredentialCipher) -> None:
    registry = _registry(tmp_path, [
        {"id": "olt-1", "base_url": "http://10.0.0.1", "password": cipher.encrypt("s3cret")},
    ], cipher)

    assert registry.get("olt-1").password == "s3cret"


def test_get_unknown_device_raises(tmp_path: Path, cipher: CredentialCipher) -> None:
    registry = _registry(tmp_path, [{"id": "olt-1", "base_url": "http://10.0.0.1"}], cipher)

    with pytest.raises(DeviceNotFoundError, match="olt-9"):
        registry.get("olt-9")


def test_get_undecryptable_password_raises(tmp_path: Path, cipher: CredentialCipher) -> None:
    registry = _registry(tmp_path, [
        {"id": "olt-1", "base_url": "http://10.0.0.1", "password_enc": "ENC[v1]:garbage"},
    ], cipher)

    with pytest.raises(SecretCryptoError):
        registry.get("olt-1")


def test_registry_follows_config_reload(tmp_path: Path, cipher: CredentialCipher) -> None:
    cfg_path = _write_config(tmp_path / "system.json", [{"id": "olt-1", "base_url": "http://10.0.0.1"}])
    settings = OltConfigSettings(ConfigManager(cfg_path))
    registry = ConfigDeviceRegistry(settings, cipher=cipher)

    _write_config(cfg_path, [{"id": "olt-2", "base_url": "http://10.0.0.2"}])
    settings.reload()

    assert [d.id for d in registry.list_devices()] == ["olt-2"]


def test_client_provider_reuses_and_rebuilds(tmp_path: Path, cipher: CredentialCipher) -> None:
    cfg_path = _write_config(tmp_path / "system.json", [
        {"id": "olt-1", "base_url": "http://10.0.0.1", "username": "admin", "password": "a"},
    ])
    settings = OltConfigSettings(ConfigManager(cfg_path))
    provider = OltClientProvider(ConfigDeviceRegistry(settings, cipher=cipher), timeout=5.0, pool_size=4)

    first = provider.get("olt-1")
    assert provider.get("olt-1") is first
    assert first.base_url == "http://10.0.0.1"

    _write_config(cfg_path, [
        {"id": "olt-1", "base_url": "http://10.0.0.1", "port": 8080, "username": "admin", "password": "b"},
    ])
    settings.reload()

    second = provider.get("olt-1")
    assert second is not first
    assert second.base_url == "http://10.0.0.1:8080"

    with pytest.raises(DeviceNotFoundError):
        provider.get("olt-2")

    provider.close()
