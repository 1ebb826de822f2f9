# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pyolt.api.main import create_app
from pyolt.config.config_manager import ConfigManager
from pyolt.config.system_config_settings import OltConfigSettings
from pyolt.lib.cache.response_cache import MemoryResponseCache
from pyolt.lib.constants import (
    DELETE_ONU_ENDPOINT,
    ONU_DETAIL_ENDPOINT,
    ONU_LIST_ENDPOINT,
    PON_LIST_ENDPOINT,
    SAVE_CONFIG_ENDPOINT,
    SET_ONU_ENDPOINT,
    SYSTEM_ENDPOINT,
)
from pyolt.lib.exceptions import AuthenticationFailedError, RequestFailedError
from pyolt.olt.history.onu_history import MemoryOnuHistory
from pyolt.startup.runtime import OltRuntime
from pyolt.version import __version__

from conftest import ONU_INFO, FakeOltClient, FakeRegistry, js_array, page

BASE = "/api/v1/devices"


@pytest.fixture()
def settings(tmp_path: Path) -> OltConfigSettings:
    cfg_path = tmp_path / "system.json"
    cfg_path.write_text(json.dumps({
        "Cache": {"enabled": True, "ttl_seconds": 60, "backend": "memory"},
        "Scraper": {"timeout_seconds": 5, "max_workers": 4},
    }), encoding="utf-8")
    return OltConfigSettings(ConfigManager(cfg_path))


@pytest.fixture()
def api(settings: OltConfigSettings, fake_registry: FakeRegistry, fake_client: FakeOltClient,
        monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    runtime = OltRuntime.build(settings, registry=fake_registry, cache=MemoryResponseCache(),
                               history=MemoryOnuHistory())
    monkeypatch.setattr(runtime.clients, "client_for", lambda device: fake_client)
    with TestClient(create_app(runtime)) as client:
        yield client


def test_health(api: TestClient) -> None:
    body = api.get("/health").json()

    assert body["success"] is True
    assert body["message"] == "OK"
    assert body["data"] == {"status": "healthy", "service": "pyolt", "version": __version__}
    assert "timestamp" in body
    assert "error" not in body


def test_list_devices_hides_password(api: TestClient) -> None:
    response = api.get(BASE)

    assert response.status_code == 200
    devices = response.json()["data"]
    assert devices[0]["id"] == "olt-1"
    assert devices[0]["port"] == 8080
    assert "password" not in devices[0]


def test_get_device(api: TestClient) -> None:
    response = api.get(f"{BASE}/olt-1")

    assert response.status_code == 200
    body = response.json()
    assert body["device_id"] == "olt-1"
    assert body["data"]["name"] == "Core OLT"
    assert "password" not in body["data"]

    assert api.get(f"{BASE}/olt-9").status_code == 404


def test_device_status(api: TestClient, fake_client: FakeOltClient) -> None:
    fake_client.probe_error = AuthenticationFailedError("authentication failed: invalid credentials",
                                                        status_code=401)

    body = api.get(f"{BASE}/olt-1/status").json()

    assert body["success"] is True
    assert body["device_id"] == "olt-1"
    assert body["data"]["reachable"] is False
    assert body["data"]["error"] == "authentication failed: invalid credentials"


def test_system_info(api: TestClient, fake_client: FakeOltClient, system_html: str) -> None:
    fake_client.routes[SYSTEM_ENDPOINT] = system_html

    body = api.get(f"{BASE}/olt-1/system").json()

    assert body["data"]["software_version"] == "V2.3.1"
    assert body["data"]["cpu_usage"] == 12.5


def test_save_config(api: TestClient, fake_client: FakeOltClient) -> None:
    body = api.post(f"{BASE}/olt-1/save-config").json()

    assert body["success"] is True
    assert body["message"] == "Configuration saved successfully"
    assert fake_client.posts == [(SAVE_CONFIG_ENDPOINT, {})]


def test_list_pons(api: TestClient, fake_client: FakeOltClient, pon_list_html: str) -> None:
    fake_client.routes[PON_LIST_ENDPOINT] = pon_list_html

    body = api.get(f"{BASE}/olt-1/pons").json()

    assert body["data"] == [
        {"pon_id": "1", "full_id": "0/1", "info": "EPON port 1"},
        {"pon_id": "2", "full_id": "0/2", "info": "N/A"},
    ]


@pytest.mark.parametrize("pon_id", ["1", "0/1"])
def test_list_pon_onus_with_filter(api: TestClient, fake_client: FakeOltClient, onu_list_html: str,
                                   pon_id: str) -> None:
    fake_client.routes[ONU_LIST_ENDPOINT] = onu_list_html

    body = api.get(f"{BASE}/olt-1/pons/{pon_id}/onus", params={"filter": "offline"}).json()

    assert [o["onu_id"] for o in body["data"]] == ["0/1:2"]
    assert body["data"][0]["metrics"]["rx_power"] == -25.0
    assert fake_client.gets[-1] == (ONU_LIST_ENDPOINT, {"oltponno": "0/1"})


def test_all_onus_reports_partial_failure(api: TestClient, fake_client: FakeOltClient,
                                          pon_list_html: str, onu_list_html: str) -> None:
    fake_client.routes[PON_LIST_ENDPOINT] = pon_list_html

    def onu_pages(params: dict[str, str]) -> str:
        if params["oltponno"] == "0/2":
            raise RequestFailedError("timeout")
        return onu_list_html

    fake_client.routes[ONU_LIST_ENDPOINT] = onu_pages

    response = api.get(f"{BASE}/olt-1/onus")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "1 of 2 PON ports could not be read"
    assert len(body["data"]["onus"]) == 2
    assert body["data"]["errors"][0]["pon_id"] == "0/2"


def test_onu_logs_newest_first_with_limit(api: TestClient, fake_client: FakeOltClient,
                                          onu_list_html: str) -> None:
    fake_client.routes[ONU_LIST_ENDPOINT] = onu_list_html
    api.get(f"{BASE}/olt-1/pons/1/onus")

    every = api.get(f"{BASE}/olt-1/logs").json()
    latest = api.get(f"{BASE}/olt-1/logs", params={"limit": 1}).json()

    assert [e["onu_id"] for e in every["data"]] == ["0/1:2", "0/1:1"]
    assert every["data"][1]["rx_power"] == -20.5
    assert "recorded_at" in every["data"][0]
    assert [e["onu_id"] for e in latest["data"]] == ["0/1:2"]


def test_onu_logs_unknown_device_is_404(api: TestClient) -> None:
    assert api.get(f"{BASE}/olt-9/logs").status_code == 404


def test_onu_detail(api: TestClient, fake_client: FakeOltClient, onu_detail_html: str) -> None:
    fake_client.routes[ONU_DETAIL_ENDPOINT] = onu_detail_html

    body = api.get(f"{BASE}/olt-1/onus/1:1").json()

    assert body["data"]["onu_id"] == "0/1:1"
    assert body["data"]["optical_module"]["tx_power"] == 2.1


def test_onu_detail_bad_id_is_400(api: TestClient) -> None:
    response = api.get(f"{BASE}/olt-1/onus/0/1")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "invalid ONU ID format" in body["error"]
    assert body["device_id"] == "olt-1"


def test_rename_onu(api: TestClient, fake_client: FakeOltClient) -> None:
    response = api.put(f"{BASE}/olt-1/onus/0/1:1", json={"name": "Basement"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "ONU name updated successfully"
    assert body["data"] == {"device_id": "olt-1", "onu_id": "0/1:1", "name": "Basement"}
    assert fake_client.posts[0][0] == SET_ONU_ENDPOINT


def test_rename_requires_name(api: TestClient, fake_client: FakeOltClient) -> None:
    response = api.put(f"{BASE}/olt-1/onus/0/1:1", json={"name": ""})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")
    assert fake_client.posts == []


def test_onu_action(api: TestClient, fake_client: FakeOltClient) -> None:
    fake_client.routes[ONU_DETAIL_ENDPOINT] = page(js_array("onuinfo", ONU_INFO))

    body = api.post(f"{BASE}/olt-1/onus/0/1:1/action", json={"action": "reboot"}).json()

    assert body["message"] == "Action 'reboot' performed successfully"
    assert body["data"] == {"device_id": "olt-1", "onu_id": "0/1:1", "action": "reboot"}
    assert fake_client.posts[0][1]["onuOperation"] == "rebootOp"


def test_onu_action_unsupported_is_400(api: TestClient, fake_client: FakeOltClient) -> None:
    response = api.post(f"{BASE}/olt-1/onus/0/1:1/action", json={"action": "explode"})

    assert response.status_code == 400
    assert "unsupported action: explode" in response.json()["error"]
    assert fake_client.posts == []


def test_delete_onu(api: TestClient, fake_client: FakeOltClient) -> None:
    body = api.delete(f"{BASE}/olt-1/onus/0/1:8").json()

    assert body["message"] == "ONU deleted successfully"
    assert fake_client.posts == [(DELETE_ONU_ENDPOINT, {"chk8": "on", "onuId": "0/1:8"})]


def test_unknown_device_is_404(api: TestClient) -> None:
    response = api.get(f"{BASE}/olt-9/pons")

    assert response.status_code == 404
    assert response.json()["error"] == "device 'olt-9' not found"


def test_device_failure_is_502(api: TestClient, fake_client: FakeOltClient) -> None:
    fake_client.routes[PON_LIST_ENDPOINT] = RequestFailedError("unexpected status code: 500", status_code=500)

    response = api.get(f"{BASE}/olt-1/pons")

    assert response.status_code == 502
    assert response.json()["error"].startswith("failed to fetch PON list")


def test_missing_page_variable_is_502(api: TestClient, fake_client: FakeOltClient) -> None:
    fake_client.routes[SYSTEM_ENDPOINT] = "<html>login</html>"

    response = api.get(f"{BASE}/olt-1/system")

    assert response.status_code == 502
    assert "sysInfo" in response.json()["error"]


def test_all_routers_are_registered(api: TestClient) -> None:
    paths = set(api.app.openapi()["paths"])

    assert f"{BASE}/{{device_id}}" in paths
    assert f"{BASE}/{{device_id}}/logs" in paths
    assert f"{BASE}/{{device_id}}/pons" in paths
    assert f"{BASE}/{{device_id}}/onus/{{onu_id}}/action" in paths
    assert f"{BASE}/{{device_id}}/save-config" in paths
