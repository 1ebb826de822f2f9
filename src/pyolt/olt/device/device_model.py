# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from typing import cast

from pydantic import BaseModel, ConfigDict, Field

from pyolt.lib.types import DeviceId, UrlStr, UserNameStr

DEFAULT_HTTP_PORT: int = 80


class DeviceDescriptor(BaseModel):
    """
    One managed OLT as declared in the ``Devices`` section of system.json.

    ``password`` is never serialized; it only travels from the registry to
    the HTTP client.
    """
    model_config = ConfigDict(frozen=True)

    id: DeviceId            = Field(..., min_length=1, description="Unique Device Id")
    name: str               = Field("", description="Display Name")
    base_url: UrlStr        = Field(..., min_length=1, description="Scheme And Host, e.g. http://192.168.1.100")
    port: int               = Field(DEFAULT_HTTP_PORT, ge=0, le=65535, description="HTTP Port; 0 or 80 keeps base_url as-is")
    username: UserNameStr   = Field(cast(UserNameStr, ""), description="Basic-Auth User")
    password: str           = Field("", exclude=True, repr=False, description="Basic-Auth Password")
    status: str             = Field("active", description="Administrative Status")

    @property
    def endpoint_url(self) -> UrlStr:
        """``base_url`` with ``:<port>`` appended unless the port is 0 or 80."""
        base = self.base_url.rstrip("/")
        if self.port > 0 and self.port != DEFAULT_HTTP_PORT:
            return cast(UrlStr, f"{base}:{self.port}")
        return cast(UrlStr, base)
