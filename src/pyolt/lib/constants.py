# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from typing import Final, cast

from pyolt.lib.types import EndpointPath, FormOperation, JsVarName, StringEnum

# ────────────────────────────────────────────────────────────────────────────────
# OLT web-management endpoints
# ────────────────────────────────────────────────────────────────────────────────
PON_LIST_ENDPOINT: Final[EndpointPath]      = cast(EndpointPath, "/onuOverviewPonList.asp")
ONU_LIST_ENDPOINT: Final[EndpointPath]      = cast(EndpointPath, "/onuOverview.asp")
ONU_DETAIL_ENDPOINT: Final[EndpointPath]    = cast(EndpointPath, "/onuConfig.asp")
SYSTEM_ENDPOINT: Final[EndpointPath]        = cast(EndpointPath, "/system.asp")
SET_ONU_ENDPOINT: Final[EndpointPath]       = cast(EndpointPath, "/goform/setOnu")
DELETE_ONU_ENDPOINT: Final[EndpointPath]    = cast(EndpointPath, "/goform/deleteOnu")
SAVE_CONFIG_ENDPOINT: Final[EndpointPath]   = cast(EndpointPath, "/saveConfig.asp")

# Query / form field names understood by the OLT
PARAM_PON_NO: Final[str]        = "oltponno"
PARAM_ONU_NO: Final[str]        = "onuno"
FORM_ONU_ID: Final[str]         = "onuId"
FORM_ONU_NAME: Final[str]       = "onuName"
FORM_ONU_OPERATION: Final[str]  = "onuOperation"
FORM_DELETE_CHECK_PREFIX: Final[str] = "chk"
FORM_CHECKED: Final[str]        = "on"

# ────────────────────────────────────────────────────────────────────────────────
# Pseudo-array variable names embedded in the pages
# ────────────────────────────────────────────────────────────────────────────────
PON_LIST_VAR: Final[JsVarName]      = cast(JsVarName, "ponListTable")
ONU_LIST_VAR: Final[JsVarName]      = cast(JsVarName, "onutable")
ONU_INFO_VAR: Final[JsVarName]      = cast(JsVarName, "onuinfo")
ONU_OPM_VAR: Final[JsVarName]       = cast(JsVarName, "onuOpmInfo")
SYSTEM_INFO_VAR: Final[JsVarName]   = cast(JsVarName, "sysInfo")

# ────────────────────────────────────────────────────────────────────────────────
# Coded lookups
# ────────────────────────────────────────────────────────────────────────────────
NUMERIC_PLACEHOLDERS: Final[frozenset[str]] = frozenset({"", "N/A", "--"})

ONLINE_STATUS_LABEL: Final[dict[str, str]] = {
    "0": "offline",
    "1": "online",
    "2": "poweroff",
}

CTC_STATUS_LABEL: Final[dict[str, str]] = {
    "0": "--",
    "1": "MpcpDiscovery",
    "2": "MpcpSla",
    "3": "CtcInfo",
    "4": "RequestCfg",
    "5": "CtcNegDone",
}
CTC_STATUS_UNKNOWN: Final[str] = "unknown"

DEACTIVATED_CODE: Final[str] = "2"

# Vendor distance calibration: meters = raw * SCALE - OFFSET, folded once above OFFSET
DISTANCE_SCALE: Final[float]    = 1.6393
DISTANCE_OFFSET: Final[float]   = 157.0
DISTANCE_FLOOR: Final[int]      = 1

# ────────────────────────────────────────────────────────────────────────────────
# Identifiers
# ────────────────────────────────────────────────────────────────────────────────
DEFAULT_SHELF: Final[str]       = "0"
SHELF_SEPARATOR: Final[str]     = "/"
ONU_INDEX_SEPARATOR: Final[str] = ":"

# Name sent back to the OLT when an action must preserve a blank name
FALLBACK_ONU_NAME: Final[str]       = "ONU"
BLANK_ONU_NAMES: Final[frozenset[str]] = frozenset({"", "NA"})


class OnuOperation(StringEnum):
    """Values accepted by the ``onuOperation`` field of ``/goform/setOnu``."""
    RENAME      = "nonOp"
    REBOOT      = "rebootOp"
    ACTIVATE    = "activeOp"
    DEACTIVATE  = "noactiveOp"
    RESTORE     = "restoreOp"
    CLEAN_LOOP  = "cleanLoopOp"


class OnuAction(StringEnum):
    """User-facing ONU actions."""
    REBOOT      = "reboot"
    ACTIVATE    = "activate"
    DEACTIVATE  = "deactivate"
    FACTORY     = "factory"
    CLEAN_LOOP  = "cleanloop"


ONU_ACTION_OPERATION: Final[dict[OnuAction, FormOperation]] = {
    OnuAction.REBOOT:       cast(FormOperation, OnuOperation.REBOOT.value),
    OnuAction.ACTIVATE:     cast(FormOperation, OnuOperation.ACTIVATE.value),
    OnuAction.DEACTIVATE:   cast(FormOperation, OnuOperation.DEACTIVATE.value),
    OnuAction.FACTORY:      cast(FormOperation, OnuOperation.RESTORE.value),
    OnuAction.CLEAN_LOOP:   cast(FormOperation, OnuOperation.CLEAN_LOOP.value),
}
