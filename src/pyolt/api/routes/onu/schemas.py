# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from pydantic import BaseModel, Field


class OnuRenameRequest(BaseModel):
    name: str = Field(..., min_length=1, description="New ONU Name")


class OnuActionRequest(BaseModel):
    action: str = Field(..., min_length=1, description="reboot | activate | deactivate | factory | cleanloop")
