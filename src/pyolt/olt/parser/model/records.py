# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyolt.lib.types import DistanceMeters, OnuIdStr, PonIdStr, PonShortIdStr


class OltRecordModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class PonPortModel(OltRecordModel):
    pon_id: PonShortIdStr   = Field(..., description="Short Port Id, e.g. '1'")
    full_id: PonIdStr       = Field(..., description="Port Id As Reported By The OLT, e.g. '0/1'")
    info: str               = Field("", description="Free-Form Port Info Column")


class OnuMetricsModel(OltRecordModel):
    temperature: float  = Field(0.0, description="Module Temperature In Degrees C")
    voltage: float      = Field(0.0, description="Supply Voltage In V")
    current: float      = Field(0.0, description="Laser Bias Current In mA")
    tx_power: float     = Field(0.0, description="Transmit Power In dBm")
    rx_power: float     = Field(0.0, description="Receive Power In dBm")


class OnuSummaryModel(OltRecordModel):
    onu_id: OnuIdStr                = Field(..., description="Canonical ONU Id, e.g. '0/1:8'")
    name: str                       = Field("", description="Operator Assigned Name")
    mac_address: str                = Field("", description="ONU MAC Address")
    status: str                     = Field("", description="offline | online | poweroff, or the raw code")
    fw_version: str                 = Field("", description="Firmware Version")
    chip_id: str                    = Field("", description="Chip Identifier")
    ports: int                      = Field(0, description="Number Of Ethernet Ports")
    distance_meters: DistanceMeters = Field(DistanceMeters(0), description="Calibrated Fiber Distance In Meters")
    ctc_status: str                 = Field("", description="CTC Negotiation State")
    ctc_version: str                = Field("", description="CTC Protocol Version")
    is_activated: bool              = Field(True, description="False When The OLT Reports The ONU Deactivated")
    metrics: OnuMetricsModel        = Field(default_factory=OnuMetricsModel, description="Optical Metrics")


class OpticalModuleModel(OltRecordModel):
    temperature: float  = Field(0.0, description="Module Temperature In Degrees C")
    voltage: float      = Field(0.0, description="Supply Voltage In V")
    bias_current: float = Field(0.0, description="Laser Bias Current In mA")
    tx_power: float     = Field(0.0, description="Transmit Power In dBm")
    rx_power: float     = Field(0.0, description="Receive Power In dBm")


class OnuDetailModel(OltRecordModel):
    onu_id: OnuIdStr                            = Field(..., description="Canonical ONU Id, e.g. '0/1:8'")
    name: str                                   = Field("", description="Operator Assigned Name")
    mac_address: str                            = Field("", description="ONU MAC Address")
    status: str                                 = Field("", description="offline | online | poweroff, or the raw code")
    fw_version: str                             = Field("", description="Firmware Version")
    chip_id: str                                = Field("", description="Chip Identifier")
    ports: int                                  = Field(0, description="Number Of Ethernet Ports")
    first_uptime: str                           = Field("", description="First Registration Time")
    last_uptime: str                            = Field("", description="Last Registration Time")
    last_offtime: str                           = Field("", description="Last Deregistration Time")
    is_activated: bool                          = Field(True, description="False When The OLT Reports The ONU Deactivated")
    optical_module: OpticalModuleModel | None   = Field(None, description="Optical Readings, When The Page Carries Them")


class SystemInfoModel(OltRecordModel):
    system_name: str        = Field("", description="System Name")
    system_description: str = Field("", description="System Description")
    system_location: str    = Field("", description="System Location")
    switch_type: str        = Field("", description="Device Type")
    software_version: str   = Field("", description="Software Version")
    revision: str           = Field("", description="Software Revision")
    mac_address: str        = Field("", description="Management MAC Address")
    ip_address: str         = Field("", description="Management IP Address")
    run_time: str           = Field("", description="Uptime As Reported")
    hardware_version: str   = Field("", description="Hardware Version")
    serial_number: str      = Field("", description="Serial Number")
    cpu_usage: float        = Field(0.0, description="CPU Usage In Percent")
    memory_usage: float     = Field(0.0, description="Memory Usage In Percent")
