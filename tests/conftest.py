# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

import pytest

from pyolt.lib.exceptions import DeviceNotFoundError
from pyolt.lib.types import HtmlStr
from pyolt.olt.device.device_model import DeviceDescriptor

ONU_ROW_ONLINE: tuple[str, ...] = (
    "0/1:1", "ONU-A", "aa:bb:cc:00:00:01", "1", "V1.0", "6301", "1",
    "5", "CTC3.0", "1", "200", "45.2", "3.3", "12.5", "2.1", "-20.5",
)
ONU_ROW_OFFLINE: tuple[str, ...] = (
    "0/1:2", "ONU-B", "aa:bb:cc:00:00:02", "0", "V1.1", "6301", "4",
    "0", "CTC2.1", "2", "0", "N/A", "--", "", "garbage", "-25",
)
ONU_INFO: tuple[str, ...] = (
    "0/1:1", "ONU-A", "aa:bb:cc:00:00:01", "1", "V1.0", "6301", "4",
    "2025-01-01 10:00:00", "2025-01-02 10:00:00", "2025-01-01 09:00:00", "x", "y", "1",
)
ONU_OPM: tuple[str, ...] = ("0/1:1", "45.2", "3.3", "12.5", "2.1", "-20.5")
SYS_INFO: tuple[str, ...] = (
    "EPON", "waru", "Unknown", "OLT", "V2.3.1", "R01", "aa:bb:cc:dd:ee:ff",
    "192.168.1.100", "1 days 02:03:04", "V1.0", "SN123456", "12.5", "40",
)


def js_array(var_name: str, values: Sequence[str]) -> str:
    literals = ",".join(f"'{value}'" for value in values)
    return f"var {var_name}=new Array({literals});"


def page(*statements: str) -> str:
    body = "\n".join(statements)
    return f"<html><head><script type=\"text/javascript\">\n{body}\n</script></head><body></body></html>"


@pytest.fixture()
def make_page() -> Callable[..., str]:
    return page


@pytest.fixture()
def make_array() -> Callable[[str, Sequence[str]], str]:
    return js_array


@pytest.fixture()
def pon_list_html() -> str:
    return page(js_array("ponListTable", ["0/1", "EPON port 1", "0/2", "N/A"]))


@pytest.fixture()
def onu_list_html() -> str:
    return page(js_array("onutable", [*ONU_ROW_ONLINE, *ONU_ROW_OFFLINE]))


@pytest.fixture()
def onu_detail_html() -> str:
    return page(js_array("onuinfo", ONU_INFO), js_array("onuOpmInfo", ONU_OPM))


@pytest.fixture()
def system_html() -> str:
    return page(js_array("sysInfo", SYS_INFO))


Route = str | Exception | Callable[[dict[str, str]], str]


class FakeRegistry:
    """In-memory device registry."""

    def __init__(self, *devices: DeviceDescriptor) -> None:
        self.devices = {device.id: device for device in devices}

    def list_devices(self) -> list[DeviceDescriptor]:
        return list(self.devices.values())

    def get(self, device_id: str) -> DeviceDescriptor:
        if device_id not in self.devices:
            raise DeviceNotFoundError(f"device '{device_id}' not found")
        return self.devices[device_id]


class FakeOltClient:
    """
    Scripted stand-in for ``OltHttpClient``.

    ``routes`` maps an endpoint to a page body, an exception to raise, or a
    callable receiving the query parameters.
    """

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = dict(routes or {})
        self.gets: list[tuple[str, dict[str, str]]] = []
        self.posts: list[tuple[str, dict[str, str]]] = []
        self.probe_error: Exception | None = None

    def get(self, endpoint: str, params: Mapping[str, str] | None = None) -> HtmlStr:
        query = dict(params or {})
        self.gets.append((endpoint, query))
        route = self.routes.get(endpoint)
        if route is None:
            raise AssertionError(f"unexpected GET {endpoint}")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return HtmlStr(route(query))
        return HtmlStr(route)

    def post(self, endpoint: str, form: Mapping[str, str] | None = None) -> HtmlStr:
        self.posts.append((endpoint, dict(form or {})))
        route = self.routes.get(endpoint, "")
        if isinstance(route, Exception):
            raise route
        return HtmlStr("<html>ok</html>")

    def check_connection(self) -> None:
        if self.probe_error is not None:
            raise self.probe_error

    def close(self) -> None:
        pass


DEVICE = DeviceDescriptor(id="olt-1", name="Core OLT", base_url="http://10.0.0.1", port=8080,
                          username="admin", password="secret")


@pytest.fixture()
def fake_registry() -> FakeRegistry:
    return FakeRegistry(DEVICE)


@pytest.fixture()
def fake_client() -> FakeOltClient:
    return FakeOltClient()
