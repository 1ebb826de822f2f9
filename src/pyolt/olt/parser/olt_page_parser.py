# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from pyolt.lib.exceptions import NotFoundError
from pyolt.olt.parser.field_schema import (
    ONU_INFO_SCHEMA,
    ONU_LIST_SCHEMA,
    ONU_OPM_SCHEMA,
    PON_LIST_SCHEMA,
    SYSTEM_INFO_SCHEMA,
)
from pyolt.olt.parser.js_array import JsArrayExtractor
from pyolt.olt.parser.model.records import (
    OnuDetailModel,
    OnuSummaryModel,
    OpticalModuleModel,
    PonPortModel,
    SystemInfoModel,
)
from pyolt.olt.parser.record_mapper import RecordMapper


class OltPageParser:
    """
    Parse the OLT management pages into records.

    - ``/onuOverviewPonList.asp`` -> ``parse_pon_list``
    - ``/onuOverview.asp``        -> ``parse_onu_list``
    - ``/onuConfig.asp``          -> ``parse_onu_detail``
    - ``/system.asp``             -> ``parse_system_info``

    List pages drop an incomplete trailing record silently; the single-record
    pages raise ``MalformedRecordError`` when short.
    """

    def __init__(self, mapper: RecordMapper | None = None) -> None:
        self._mapper = mapper if mapper is not None else RecordMapper()

    def parse_pon_list(self, html: str) -> list[PonPortModel]:
        fields = JsArrayExtractor.extract(html, PON_LIST_SCHEMA.var_name)
        return self._mapper.map_chunks(fields, PON_LIST_SCHEMA)

    def parse_onu_list(self, html: str) -> list[OnuSummaryModel]:
        fields = JsArrayExtractor.extract(html, ONU_LIST_SCHEMA.var_name)
        return self._mapper.map_chunks(fields, ONU_LIST_SCHEMA)

    def parse_onu_detail(self, html: str) -> OnuDetailModel:
        """
        Parse An ONU Configuration Page.

        The optical module block is optional: when ``onuOpmInfo`` is absent
        or short, ``optical_module`` is ``None``.

        Raises:
            NotFoundError: If ``onuinfo`` is absent.
            MalformedRecordError: If ``onuinfo`` has fewer than 13 fields.
        """
        info = JsArrayExtractor.extract(html, ONU_INFO_SCHEMA.var_name)
        detail = self._mapper.map_single(info, ONU_INFO_SCHEMA)

        module = self._optical_module(html)
        if module is None:
            return detail
        return detail.model_copy(update={"optical_module": module})

    def parse_system_info(self, html: str) -> SystemInfoModel:
        fields = JsArrayExtractor.extract(html, SYSTEM_INFO_SCHEMA.var_name)
        return self._mapper.map_single(fields, SYSTEM_INFO_SCHEMA)

    def _optical_module(self, html: str) -> OpticalModuleModel | None:
        try:
            fields = JsArrayExtractor.extract(html, ONU_OPM_SCHEMA.var_name)
        except NotFoundError:
            return None
        if len(fields) < ONU_OPM_SCHEMA.min_arity:
            return None
        return self._mapper.decode(fields, ONU_OPM_SCHEMA)
