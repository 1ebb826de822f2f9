# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, cast

from pyolt.lib.constants import DEFAULT_SHELF, ONU_INDEX_SEPARATOR, SHELF_SEPARATOR
from pyolt.lib.exceptions import InvalidIdentifierError
from pyolt.lib.types import OnuIdStr, OnuIndexStr, PonIdStr, PonShortIdStr

_PLAIN_INTEGER = re.compile(r"[0-9]+")


def _is_plain_integer(value: str) -> bool:
    return _PLAIN_INTEGER.fullmatch(value) is not None


def normalize_pon_id(pon_id: str) -> PonIdStr:
    """
    Expand A Bare Port Number To The Canonical ``<shelf>/<port>`` Form.

    ``"2"`` becomes ``"0/2"``; anything that is not a plain integer
    (``"0/2"``, ``"1/1/1"``, ``"abc"``) is returned unchanged.
    """
    if _is_plain_integer(pon_id):
        return cast(PonIdStr, f"{DEFAULT_SHELF}{SHELF_SEPARATOR}{pon_id}")
    return cast(PonIdStr, pon_id)


def normalize_onu_id(onu_id: str) -> OnuIdStr:
    """
    Expand The ``<port>:<index>`` Shorthand To ``<shelf>/<port>:<index>``.

    ``"1:8"`` becomes ``"0/1:8"``. The rewrite only happens when the value has
    exactly one ``:`` and its port part is a plain integer; every other shape
    passes through unchanged.
    """
    parts = onu_id.split(ONU_INDEX_SEPARATOR)
    if len(parts) == 2 and _is_plain_integer(parts[0]):
        return cast(OnuIdStr, f"{DEFAULT_SHELF}{SHELF_SEPARATOR}{parts[0]}{ONU_INDEX_SEPARATOR}{parts[1]}")
    return cast(OnuIdStr, onu_id)


def short_pon_id(full_id: str) -> PonShortIdStr:
    """Reduce ``"0/1"`` to ``"1"``; ids without a single shelf separator pass through."""
    parts = full_id.split(SHELF_SEPARATOR)
    if len(parts) == 2:
        return cast(PonShortIdStr, parts[1])
    return cast(PonShortIdStr, full_id)


@dataclass(frozen=True)
class OnuIdentifier:
    """
    Canonical ONU identifier split into its PON port and positional index.

    ``OnuIdentifier.parse("0/1:8")`` yields ``pon_id="0/1"`` and ``index="8"``.
    Shorthand input is normalized first, so ``parse("1:8")`` is equivalent.
    """
    pon_id: PonIdStr
    index: OnuIndexStr

    _EXPECTED: ClassVar[str] = "PON:ONU, e.g., 0/1:8"

    @classmethod
    def parse(cls, onu_id: str) -> OnuIdentifier:
        """
        Parse A Canonical Or Shorthand ONU Id.

        Raises:
            InvalidIdentifierError: If the id does not split into exactly one
                ``port:index`` pair.
        """
        canonical = normalize_onu_id(onu_id.strip())
        parts = canonical.split(ONU_INDEX_SEPARATOR)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidIdentifierError(
                f"invalid ONU ID format: {onu_id} (expected format: {cls._EXPECTED})")
        return cls(pon_id=cast(PonIdStr, parts[0]), index=cast(OnuIndexStr, parts[1]))

    @property
    def onu_id(self) -> OnuIdStr:
        return cast(OnuIdStr, f"{self.pon_id}{ONU_INDEX_SEPARATOR}{self.index}")

    def __str__(self) -> str:
        return self.onu_id
