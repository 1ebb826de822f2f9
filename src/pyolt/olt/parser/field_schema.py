# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from pyolt.lib.constants import (
    ONU_INFO_VAR,
    ONU_LIST_VAR,
    ONU_OPM_VAR,
    PON_LIST_VAR,
    SYSTEM_INFO_VAR,
)
from pyolt.lib.types import JsVarName, StringEnum
from pyolt.olt.parser.model.records import (
    OnuDetailModel,
    OnuSummaryModel,
    OpticalModuleModel,
    PonPortModel,
    SystemInfoModel,
)

M = TypeVar("M", bound=BaseModel)


class FieldKind(StringEnum):
    TEXT            = "text"
    INT             = "int"
    FLOAT           = "float"
    ONLINE_STATUS   = "online_status"
    CTC_STATUS      = "ctc_status"
    ACTIVATION      = "activation"
    DISTANCE        = "distance"
    SHORT_PON_ID    = "short_pon_id"


@dataclass(frozen=True)
class FieldSpec:
    """
    One decoded attribute of a record.

    ``position`` indexes the chunk; several specs may read the same position.
    ``group`` nests the value under a sub-object (e.g. ``metrics``).
    """
    position: int
    name: str
    kind: FieldKind = FieldKind.TEXT
    group: str | None = None


@dataclass(frozen=True)
class RecordSchema(Generic[M]):
    """Layout of one pseudo-array: where it lives, how wide a record is, what it becomes."""
    var_name: JsVarName
    arity: int
    min_arity: int
    fields: tuple[FieldSpec, ...]
    model: type[M]


PON_LIST_SCHEMA: RecordSchema[PonPortModel] = RecordSchema(
    var_name    = PON_LIST_VAR,
    arity       = 2,
    min_arity   = 2,
    model       = PonPortModel,
    fields      = (
        FieldSpec(0, "pon_id", FieldKind.SHORT_PON_ID),
        FieldSpec(0, "full_id"),
        FieldSpec(1, "info"),
    ),
)

ONU_LIST_SCHEMA: RecordSchema[OnuSummaryModel] = RecordSchema(
    var_name    = ONU_LIST_VAR,
    arity       = 16,
    min_arity   = 16,
    model       = OnuSummaryModel,
    fields      = (
        FieldSpec(0,  "onu_id"),
        FieldSpec(1,  "name"),
        FieldSpec(2,  "mac_address"),
        FieldSpec(3,  "status", FieldKind.ONLINE_STATUS),
        FieldSpec(4,  "fw_version"),
        FieldSpec(5,  "chip_id"),
        FieldSpec(6,  "ports", FieldKind.INT),
        FieldSpec(7,  "ctc_status", FieldKind.CTC_STATUS),
        FieldSpec(8,  "ctc_version"),
        FieldSpec(9,  "is_activated", FieldKind.ACTIVATION),
        FieldSpec(10, "distance_meters", FieldKind.DISTANCE),
        FieldSpec(11, "temperature", FieldKind.FLOAT, "metrics"),
        FieldSpec(12, "voltage", FieldKind.FLOAT, "metrics"),
        FieldSpec(13, "current", FieldKind.FLOAT, "metrics"),
        FieldSpec(14, "tx_power", FieldKind.FLOAT, "metrics"),
        FieldSpec(15, "rx_power", FieldKind.FLOAT, "metrics"),
    ),
)

# Positions 10 and 11 are present on the page but carry nothing we expose
ONU_INFO_SCHEMA: RecordSchema[OnuDetailModel] = RecordSchema(
    var_name    = ONU_INFO_VAR,
    arity       = 13,
    min_arity   = 13,
    model       = OnuDetailModel,
    fields      = (
        FieldSpec(0,  "onu_id"),
        FieldSpec(1,  "name"),
        FieldSpec(2,  "mac_address"),
        FieldSpec(3,  "status", FieldKind.ONLINE_STATUS),
        FieldSpec(4,  "fw_version"),
        FieldSpec(5,  "chip_id"),
        FieldSpec(6,  "ports", FieldKind.INT),
        FieldSpec(7,  "first_uptime"),
        FieldSpec(8,  "last_uptime"),
        FieldSpec(9,  "last_offtime"),
        FieldSpec(12, "is_activated", FieldKind.ACTIVATION),
    ),
)

ONU_OPM_SCHEMA: RecordSchema[OpticalModuleModel] = RecordSchema(
    var_name    = ONU_OPM_VAR,
    arity       = 6,
    min_arity   = 6,
    model       = OpticalModuleModel,
    fields      = (
        FieldSpec(1, "temperature", FieldKind.FLOAT),
        FieldSpec(2, "voltage", FieldKind.FLOAT),
        FieldSpec(3, "bias_current", FieldKind.FLOAT),
        FieldSpec(4, "tx_power", FieldKind.FLOAT),
        FieldSpec(5, "rx_power", FieldKind.FLOAT),
    ),
)

SYSTEM_INFO_SCHEMA: RecordSchema[SystemInfoModel] = RecordSchema(
    var_name    = SYSTEM_INFO_VAR,
    arity       = 13,
    min_arity   = 13,
    model       = SystemInfoModel,
    fields      = (
        FieldSpec(0,  "system_name"),
        FieldSpec(1,  "system_description"),
        FieldSpec(2,  "system_location"),
        FieldSpec(3,  "switch_type"),
        FieldSpec(4,  "software_version"),
        FieldSpec(5,  "revision"),
        FieldSpec(6,  "mac_address"),
        FieldSpec(7,  "ip_address"),
        FieldSpec(8,  "run_time"),
        FieldSpec(9,  "hardware_version"),
        FieldSpec(10, "serial_number"),
        FieldSpec(11, "cpu_usage", FieldKind.FLOAT),
        FieldSpec(12, "memory_usage", FieldKind.FLOAT),
    ),
)
