# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import math
import re

from pyolt.lib.constants import (
    CTC_STATUS_LABEL,
    CTC_STATUS_UNKNOWN,
    DEACTIVATED_CODE,
    DISTANCE_FLOOR,
    DISTANCE_OFFSET,
    DISTANCE_SCALE,
    NUMERIC_PLACEHOLDERS,
    ONLINE_STATUS_LABEL,
)
from pyolt.lib.exceptions import FieldDecodeError
from pyolt.lib.types import DistanceMeters

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class FieldCodec:
    """
    Decoders for the raw string fields of OLT pseudo-arrays.

    The lenient decoders (``to_int``, ``to_float``) never raise: placeholders
    and malformed values both decode to 0, which is how the pages are read in
    normal operation. The strict variants keep placeholders as 0 but raise
    ``FieldDecodeError`` on anything else they cannot read, for validating
    captured pages.
    """

    @staticmethod
    def _is_placeholder(text: str) -> bool:
        return text in NUMERIC_PLACEHOLDERS

    @classmethod
    def strict_int(cls, raw: str) -> int:
        text = raw.strip()
        if cls._is_placeholder(text):
            return 0
        if _INTEGER.fullmatch(text) is None:
            raise FieldDecodeError(f"invalid integer field: {raw!r}")
        return int(text)

    @classmethod
    def strict_float(cls, raw: str) -> float:
        text = raw.strip()
        if cls._is_placeholder(text):
            return 0.0
        if _DECIMAL.fullmatch(text) is None:
            raise FieldDecodeError(f"invalid decimal field: {raw!r}")
        value = float(text)
        if not math.isfinite(value):
            raise FieldDecodeError(f"decimal field out of range: {raw!r}")
        return value

    @classmethod
    def to_int(cls, raw: str) -> int:
        try:
            return cls.strict_int(raw)
        except FieldDecodeError:
            return 0

    @classmethod
    def to_float(cls, raw: str) -> float:
        try:
            return cls.strict_float(raw)
        except FieldDecodeError:
            return 0.0

    @staticmethod
    def online_status(code: str) -> str:
        """Map ``0/1/2`` to offline/online/poweroff; unknown codes pass through."""
        return ONLINE_STATUS_LABEL.get(code, code)

    @staticmethod
    def ctc_status(code: str) -> str:
        return CTC_STATUS_LABEL.get(code, CTC_STATUS_UNKNOWN)

    @staticmethod
    def is_activated(code: str) -> bool:
        return code != DEACTIVATED_CODE

    @classmethod
    def distance_meters(cls, raw: str, *, strict: bool = False) -> DistanceMeters:
        """
        Convert The Raw Ranging Value Into Meters.

        ``0`` means no ranging result and stays 0. Otherwise the value is
        scaled, offset once, folded once more when it lands above the offset,
        floored at 1 meter and truncated.
        """
        value = cls.strict_float(raw) if strict else cls.to_float(raw)
        if value == 0:
            return DistanceMeters(0)

        distance = value * DISTANCE_SCALE - DISTANCE_OFFSET
        if distance > DISTANCE_OFFSET:
            distance -= DISTANCE_OFFSET
        elif distance <= 0:
            distance = DISTANCE_FLOOR
        return DistanceMeters(int(distance))
