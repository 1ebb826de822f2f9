# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NewType, TypeAlias


# Enum String Type
class StringEnum(str, Enum):
    """Py3.10-compatible StrEnum shim."""
    pass

# Basic strings
String: TypeAlias       = str
StringArray: TypeAlias  = list[String]

# ────────────────────────────────────────────────────────────────────────────────
# Paths / filesystem
# ────────────────────────────────────────────────────────────────────────────────
PathLike    = str | Path
FileNameStr = NewType("FileNameStr", str)

# ────────────────────────────────────────────────────────────────────────────────
# JSON-like structures for REST I/O
# ────────────────────────────────────────────────────────────────────────────────
JSONScalar = str | int | float | bool | None
JSONDict   = dict[str, "JSONValue"]
JSONList   = list["JSONValue"]
JSONValue  = JSONScalar | JSONDict | JSONList

# ────────────────────────────────────────────────────────────────────────────────
# Device page payloads
# ────────────────────────────────────────────────────────────────────────────────
HtmlStr         = NewType("HtmlStr", str)             # raw page body as returned by the OLT
JsVarName       = NewType("JsVarName", str)           # e.g. 'onutable'
RawFieldSequence: TypeAlias = list[str]               # verbatim quoted values of one Array(...)
FieldChunk: TypeAlias       = list[str]
EndpointPath    = NewType("EndpointPath", str)        # '/onuOverview.asp'
FormOperation   = NewType("FormOperation", str)       # 'rebootOp', 'nonOp', ...

# ────────────────────────────────────────────────────────────────────────────────
# OLT identifiers
# ────────────────────────────────────────────────────────────────────────────────
DeviceId        = NewType("DeviceId", str)
PonIdStr        = NewType("PonIdStr", str)            # canonical '0/1'
PonShortIdStr   = NewType("PonShortIdStr", str)       # user-facing '1'
OnuIdStr        = NewType("OnuIdStr", str)            # canonical '0/1:8'
OnuIndexStr     = NewType("OnuIndexStr", str)         # '8'
MacAddressStr   = NewType("MacAddressStr", str)
InetAddressStr  = NewType("InetAddressStr", str)
UrlStr          = NewType("UrlStr", str)
UserNameStr     = NewType("UserNameStr", str)

# ────────────────────────────────────────────────────────────────────────────────
# Units
# ────────────────────────────────────────────────────────────────────────────────
DistanceMeters  = NewType("DistanceMeters", int)
TimestampSec    = NewType("TimestampSec", float)
TtlSeconds      = NewType("TtlSeconds", float)

# ────────────────────────────────────────────────────────────────────────────────
# Cache
# ────────────────────────────────────────────────────────────────────────────────
CacheKey        = NewType("CacheKey", str)
CachePayload    = NewType("CachePayload", str)        # serialized JSON

# ────────────────────────────────────────────────────────────────────────────────
# HTTP return code type
# ────────────────────────────────────────────────────────────────────────────────
HttpRtnCode = NewType("HttpRtnCode", int)

# ────────────────────────────────────────────────────────────────────────────────
# Explicit public surface
# ────────────────────────────────────────────────────────────────────────────────
__all__ = [
    "StringEnum",
    "String", "StringArray",
    "PathLike", "FileNameStr",
    "JSONScalar", "JSONDict", "JSONList", "JSONValue",
    "HtmlStr", "JsVarName", "RawFieldSequence", "FieldChunk", "EndpointPath", "FormOperation",
    "DeviceId", "PonIdStr", "PonShortIdStr", "OnuIdStr", "OnuIndexStr",
    "MacAddressStr", "InetAddressStr", "UrlStr", "UserNameStr",
    "DistanceMeters", "TimestampSec", "TtlSeconds",
    "CacheKey", "CachePayload",
    "HttpRtnCode",
]
