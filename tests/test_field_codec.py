# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import pytest

from pyolt.lib.exceptions import FieldDecodeError
from pyolt.olt.parser.field_codec import FieldCodec


@pytest.mark.parametrize("raw", ["", "N/A", "--", "  ", " N/A "])
def test_placeholders_decode_to_zero(raw: str) -> None:
    assert FieldCodec.to_int(raw) == 0
    assert FieldCodec.to_float(raw) == 0.0
    assert FieldCodec.strict_int(raw) == 0
    assert FieldCodec.strict_float(raw) == 0.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3.5", 3.5), (" -20.5 ", -20.5), ("7", 7.0), ("1e2", 100.0), ("abc", 0.0), ("1.2.3", 0.0), ("nan", 0.0)],
)
def test_to_float_is_lenient(raw: str, expected: float) -> None:
    assert FieldCodec.to_float(raw) == expected


@pytest.mark.parametrize(("raw", "expected"), [("4", 4), (" 12 ", 12), ("-3", -3), ("3.5", 0), ("x", 0)])
def test_to_int_is_lenient(raw: str, expected: int) -> None:
    assert FieldCodec.to_int(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1.2.3", "inf"])
def test_strict_float_rejects_garbage(raw: str) -> None:
    with pytest.raises(FieldDecodeError):
        FieldCodec.strict_float(raw)


@pytest.mark.parametrize("raw", ["3.5", "four", "1_000"])
def test_strict_int_rejects_garbage(raw: str) -> None:
    with pytest.raises(FieldDecodeError):
        FieldCodec.strict_int(raw)


@pytest.mark.parametrize(
    ("code", "label"),
    [("0", "offline"), ("1", "online"), ("2", "poweroff"), ("7", "7")],
)
def test_online_status_passes_unknown_codes_through(code: str, label: str) -> None:
    assert FieldCodec.online_status(code) == label


@pytest.mark.parametrize(
    ("code", "label"),
    [
        ("0", "--"), ("1", "MpcpDiscovery"), ("2", "MpcpSla"), ("3", "CtcInfo"),
        ("4", "RequestCfg"), ("5", "CtcNegDone"), ("9", "unknown"), ("", "unknown"),
    ],
)
def test_ctc_status_maps_unknown_to_unknown(code: str, label: str) -> None:
    assert FieldCodec.ctc_status(code) == label


@pytest.mark.parametrize(("code", "activated"), [("2", False), ("1", True), ("0", True), ("", True)])
def test_activation_flag(code: str, activated: bool) -> None:
    assert FieldCodec.is_activated(code) is activated


@pytest.mark.parametrize(
    ("raw", "meters"),
    [
        ("0", 0),
        ("", 0),
        ("200", 13),        # 200*1.6393-157 = 170.86 -> folded to 13.86
        ("150", 88),        # 245.895-157 = 88.895
        ("50", 1),          # 81.965-157 < 0 -> floored
        ("95.77", 1),       # just below the offset
        ("garbage", 0),
    ],
)
def test_distance_meters(raw: str, meters: int) -> None:
    assert FieldCodec.distance_meters(raw) == meters


def test_distance_meters_strict_rejects_garbage() -> None:
    with pytest.raises(FieldDecodeError):
        FieldCodec.distance_meters("far", strict=True)
