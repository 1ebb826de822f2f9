# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Envelope around every API answer; unset optional members are omitted."""
    success: bool           = Field(..., description="True When The Operation Succeeded")
    message: str | None     = Field(None, description="Human-Readable Outcome")
    data: Any               = Field(None, description="Operation Payload")
    error: str | None       = Field(None, description="Failure Reason")
    timestamp: datetime     = Field(default_factory=lambda: datetime.now(timezone.utc), description="Response Time (UTC)")
    device_id: str | None   = Field(None, description="Device The Response Refers To")


def success(data: Any = None, *, device_id: str | None = None, message: str | None = None) -> ApiResponse:
    return ApiResponse(success=True, data=data, device_id=device_id, message=message)


def failure(error: str, *, device_id: str | None = None) -> ApiResponse:
    return ApiResponse(success=False, error=error, device_id=device_id)
