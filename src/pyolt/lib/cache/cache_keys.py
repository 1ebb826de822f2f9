# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from typing import cast

from pyolt.lib.types import CacheKey


class CacheKeys:
    """
    Cache key builders shared by readers and the mutations that invalidate them.

    Ids are expected in canonical form (``0/1``, ``0/1:8``) so that a shorthand
    request and a canonical one land on the same entry.
    """

    @staticmethod
    def pons(device_id: str) -> CacheKey:
        return cast(CacheKey, f"pons:{device_id}")

    @staticmethod
    def onus(device_id: str, pon_id: str) -> CacheKey:
        return cast(CacheKey, f"onus:{device_id}:{pon_id}")

    @staticmethod
    def onu_detail(device_id: str, onu_id: str) -> CacheKey:
        return cast(CacheKey, f"onu-detail:{device_id}:{onu_id}")
