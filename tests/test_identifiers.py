# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import pytest

from pyolt.lib.exceptions import InvalidIdentifierError
from pyolt.lib.identifiers import OnuIdentifier, normalize_onu_id, normalize_pon_id, short_pon_id


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", "0/1"), ("12", "0/12"), ("0/1", "0/1"), ("1/1/1", "1/1/1"), ("abc", "abc"), ("", "")],
)
def test_normalize_pon_id(raw: str, expected: str) -> None:
    assert normalize_pon_id(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1:8", "0/1:8"), ("0/1:8", "0/1:8"), ("x:8", "x:8"), ("1:2:3", "1:2:3"), ("8", "8")],
)
def test_normalize_onu_id(raw: str, expected: str) -> None:
    assert normalize_onu_id(raw) == expected


def test_normalization_is_idempotent() -> None:
    assert normalize_pon_id(normalize_pon_id("3")) == "0/3"
    assert normalize_onu_id(normalize_onu_id("3:4")) == "0/3:4"


@pytest.mark.parametrize(("raw", "expected"), [("0/1", "1"), ("0/16", "16"), ("1/1/1", "1/1/1"), ("5", "5")])
def test_short_pon_id(raw: str, expected: str) -> None:
    assert short_pon_id(raw) == expected


def test_onu_identifier_parse_canonical() -> None:
    ident = OnuIdentifier.parse("0/1:8")

    assert ident.pon_id == "0/1"
    assert ident.index == "8"
    assert ident.onu_id == "0/1:8"
    assert str(ident) == "0/1:8"


def test_onu_identifier_parse_shorthand() -> None:
    assert OnuIdentifier.parse("2:5") == OnuIdentifier.parse("0/2:5")


@pytest.mark.parametrize("raw", ["0/1", "0/1:2:3", ":3", "0/1:", ""])
def test_onu_identifier_rejects_bad_shapes(raw: str) -> None:
    with pytest.raises(InvalidIdentifierError) as excinfo:
        OnuIdentifier.parse(raw)

    assert "PON:ONU" in str(excinfo.value)
