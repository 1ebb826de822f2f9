# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pytest
import requests
from requests.auth import HTTPBasicAuth

from pyolt.lib.exceptions import AuthenticationFailedError, RequestFailedError
from pyolt.olt.scraper.olt_client import OltHttpClient


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class Recorder:
    """Stand-in for ``Session.get``/``Session.post`` that remembers its calls."""

    def __init__(self, response: FakeResponse | None = None, exc: Exception | None = None) -> None:
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture()
def client() -> Iterator[OltHttpClient]:
    c = OltHttpClient("http://10.0.0.2:8080/", "admin", "secret", timeout=5.0, pool_size=4)
    yield c
    c.close()


def test_session_carries_basic_auth_and_pool(client: OltHttpClient) -> None:
    assert client.base_url == "http://10.0.0.2:8080"
    assert isinstance(client.session.auth, HTTPBasicAuth)
    assert client.session.auth.username == "admin"
    assert client.session.auth.password == "secret"
    assert "PyOLT" in client.session.headers["User-Agent"]

    adapter = client.session.get_adapter("http://10.0.0.2:8080/")
    assert adapter._pool_maxsize == 4
    assert adapter.max_retries.total == 0


def test_get_returns_body_and_sends_params(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = Recorder(FakeResponse(200, "<html>ok</html>"))
    monkeypatch.setattr(client.session, "get", recorder)

    body = client.get("/onuOverview.asp", params={"oltponno": "0/1"})

    assert body == "<html>ok</html>"
    url, kwargs = recorder.calls[0]
    assert url == "http://10.0.0.2:8080/onuOverview.asp"
    assert kwargs["params"] == {"oltponno": "0/1"}
    assert kwargs["timeout"] == 5.0


@pytest.mark.parametrize("status", [300, 302, 304, 404, 500])
def test_get_non_2xx_raises_with_status(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch,
                                        status: int) -> None:
    monkeypatch.setattr(client.session, "get", Recorder(FakeResponse(status, "<html>moved</html>")))

    with pytest.raises(RequestFailedError) as excinfo:
        client.get("/onuOverview.asp")

    assert excinfo.value.status_code == status
    assert str(status) in str(excinfo.value)


def test_get_accepts_any_2xx(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client.session, "get", Recorder(FakeResponse(203, "<html>ok</html>")))

    assert client.get("/system.asp") == "<html>ok</html>"


def test_get_transport_error_raises(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client.session, "get", Recorder(exc=requests.ConnectionError("refused")))

    with pytest.raises(RequestFailedError) as excinfo:
        client.get("/system.asp")

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_post_sends_form_and_tolerates_error_status(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch,
                                                    caplog: pytest.LogCaptureFixture) -> None:
    recorder = Recorder(FakeResponse(302, "moved"))
    monkeypatch.setattr(client.session, "post", recorder)

    with caplog.at_level(logging.WARNING, logger="OltHttpClient"):
        body = client.post("/goform/setOnu", form={"onuId": "0/1:1", "onuOperation": "rebootOp"})

    assert body == "moved"
    assert recorder.calls[0][1]["data"] == {"onuId": "0/1:1", "onuOperation": "rebootOp"}
    assert "answered" not in caplog.text

    monkeypatch.setattr(client.session, "post", Recorder(FakeResponse(500, "err")))
    with caplog.at_level(logging.WARNING, logger="OltHttpClient"):
        assert client.post("/goform/setOnu", form={}) == "err"
    assert "answered 500" in caplog.text


def test_post_transport_error_raises(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client.session, "post", Recorder(exc=requests.Timeout("slow")))

    with pytest.raises(RequestFailedError):
        client.post("/goform/setOnu", form={})


@pytest.mark.parametrize(
    ("status", "error"),
    [(401, AuthenticationFailedError), (403, RequestFailedError), (503, RequestFailedError)],
)
def test_check_connection_failures(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch,
                                   status: int, error: type[Exception]) -> None:
    monkeypatch.setattr(client.session, "get", Recorder(FakeResponse(status)))

    with pytest.raises(error) as excinfo:
        client.check_connection()

    assert excinfo.value.status_code == status


def test_check_connection_ok(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = Recorder(FakeResponse(200))
    monkeypatch.setattr(client.session, "get", recorder)

    client.check_connection()

    assert recorder.calls[0][0] == "http://10.0.0.2:8080"


def test_check_connection_probes_base_url_with_path(monkeypatch: pytest.MonkeyPatch) -> None:
    client = OltHttpClient("http://10.0.0.2/olt/", "admin", "secret")
    recorder = Recorder(FakeResponse(200))
    monkeypatch.setattr(client.session, "get", recorder)

    client.check_connection()
    client.close()

    assert recorder.calls[0][0] == "http://10.0.0.2/olt"


def test_check_connection_transport_error(client: OltHttpClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client.session, "get", Recorder(exc=requests.ConnectionError("no route")))

    with pytest.raises(RequestFailedError, match="connection failed"):
        client.check_connection()
