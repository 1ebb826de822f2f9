# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from collections.abc import Mapping

import requests
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth

from pyolt.lib.exceptions import AuthenticationFailedError, RequestFailedError
from pyolt.lib.types import HtmlStr, UrlStr

USER_AGENT: str = "Mozilla/5.0 (compatible; PyOLT)"


class OltHttpClient:
    """
    HTTP Client For One OLT Web-Management Interface.

    Every request carries HTTP basic auth. The underlying ``requests.Session``
    keeps a connection pool sized for the worker pool that fans requests out
    across PON ports, and never retries: a failed request surfaces to the
    caller immediately.
    """

    def __init__(self, base_url: str, username: str, password: str,
                 timeout: float = 60.0, pool_size: int = 10) -> None:
        """
        Args:
            base_url: Scheme, host and optional port, e.g. ``http://10.0.0.2:8080``.
            username: Basic-auth user name.
            password: Basic-auth password.
            timeout: Per-request timeout in seconds.
            pool_size: Maximum pooled connections to the device.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.base_url = UrlStr(base_url.rstrip("/"))
        self.timeout = timeout

        self.session = requests.Session()
        self.session.auth = HTTPBasicAuth(username, password)
        self.session.headers.update({"User-Agent": USER_AGENT})

        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=max(pool_size, 1), max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def get(self, endpoint: str, params: Mapping[str, str] | None = None) -> HtmlStr:
        """
        GET A Management Page.

        Raises:
            RequestFailedError: On transport failure or a non-2xx status.
        """
        url = self._url(endpoint)
        try:
            response = self.session.get(url, params=dict(params or {}), timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestFailedError(f"request failed: GET {url}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise RequestFailedError(
                f"unexpected status code: {response.status_code} for GET {url}",
                status_code=response.status_code)

        self.logger.debug("GET %s params=%s -> %d bytes", url, params, len(response.content))
        return HtmlStr(response.text)

    def post(self, endpoint: str, form: Mapping[str, str] | None = None) -> HtmlStr:
        """
        POST A Form-Encoded Body.

        The OLT answers form posts with redirects or error pages of its own
        making, so a non-2xx status is logged and the body still returned.

        Raises:
            RequestFailedError: On transport failure.
        """
        url = self._url(endpoint)
        try:
            response = self.session.post(url, data=dict(form or {}), timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestFailedError(f"request failed: POST {url}: {exc}") from exc

        if not response.ok:
            self.logger.warning("POST %s answered %d", url, response.status_code)
        return HtmlStr(response.text)

    def check_connection(self) -> None:
        """
        Probe The Bare Base URL With The Stored Credentials.

        Raises:
            AuthenticationFailedError: If the device answers 401.
            RequestFailedError: On transport failure or any other status >= 400.
        """
        url = self.base_url
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestFailedError(f"connection failed: {exc}") from exc

        if response.status_code == 401:
            raise AuthenticationFailedError("authentication failed: invalid credentials", status_code=401)
        if response.status_code >= 400:
            raise RequestFailedError(f"unexpected status code: {response.status_code}",
                                     status_code=response.status_code)

    def close(self) -> None:
        self.session.close()
