# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import re
from functools import lru_cache

from pyolt.lib.exceptions import NotFoundError
from pyolt.lib.types import FieldChunk, RawFieldSequence

_LINE_COMMENT = re.compile(r"//.*")
_WHITESPACE = re.compile(r"\s+")
_QUOTED = re.compile(r"'([^']*)'|\"([^\"]*)\"")


@lru_cache(maxsize=32)
def _declaration_pattern(var_name: str) -> re.Pattern[str]:
    return re.compile(
        r"(?<![\w$])(?:var\s+)?" + re.escape(var_name) +
        r"\s*=\s*(?:new\s+)?Array\s*\(([\s\S]*?)\)\s*;")


class JsArrayExtractor:
    """
    Pull pseudo-array literals out of OLT management pages.

    The pages embed their data as script statements such as::

        var onutable=new Array(
            '0/1:1','ONU-A','aa:bb:cc:dd:ee:01', // first unit
            ...
        );

    Only the quoted values are returned; numbers, identifiers and other
    unquoted tokens inside the parentheses are ignored.
    """

    @staticmethod
    def extract(html: str, var_name: str) -> RawFieldSequence:
        """
        Return The Quoted Values Of ``<var_name> = new Array(...)`` In Order.

        Args:
            html: Raw page body.
            var_name: Script variable holding the array.

        Returns:
            Verbatim quoted values, empty strings included. An array with no
            quoted literals yields ``[]``.

        Raises:
            NotFoundError: If the page carries no such declaration.
        """
        match = _declaration_pattern(var_name).search(html)
        if match is None:
            raise NotFoundError(var_name)

        content = _LINE_COMMENT.sub("", match.group(1))
        content = _WHITESPACE.sub(" ", content).strip()

        values: RawFieldSequence = []
        for literal in _QUOTED.finditer(content):
            single = literal.group(1)
            values.append(single if single is not None else literal.group(2))
        return values

    @staticmethod
    def chunk(fields: RawFieldSequence, size: int) -> list[FieldChunk]:
        """
        Split ``fields`` Into Consecutive Groups Of ``size``.

        The last group is shorter when ``len(fields)`` is not a multiple of
        ``size``; callers decide whether to keep it. A non-positive size
        yields no groups.
        """
        if size <= 0:
            return []
        return [fields[i:i + size] for i in range(0, len(fields), size)]
