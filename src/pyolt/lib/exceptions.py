# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations


class OltError(Exception):
    """Base exception for OLT scraping failures."""


class NotFoundError(OltError):
    """
    Named pseudo-array literal is absent from a page.

    Usually means the page layout changed or the device answered with an
    error page instead of the expected management page.
    """

    def __init__(self, var_name: str) -> None:
        super().__init__(f"variable '{var_name}' not found in HTML")
        self.var_name = var_name


class MalformedRecordError(OltError):
    """Extracted field sequence is shorter than the schema's mandatory minimum."""

    def __init__(self, var_name: str, got: int, expected: int) -> None:
        super().__init__(f"incomplete {var_name} data: got {got} fields, expected {expected}")
        self.var_name = var_name
        self.got = got
        self.expected = expected


class FieldDecodeError(OltError):
    """Strict decoding rejected a numeric field."""


class RequestFailedError(OltError):
    """
    Transport-level failure or non-2xx HTTP answer from a device.

    Attributes:
        status_code: HTTP status when the device answered, else None.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationFailedError(RequestFailedError):
    """Device rejected the stored credentials (HTTP 401) during a probe."""


class InvalidIdentifierError(OltError, ValueError):
    """ONU id does not resolve to a ``port:index`` pair."""


class UnsupportedActionError(OltError, ValueError):
    """Requested ONU action has no form operation."""


class DeviceNotFoundError(OltError):
    """Device id is not present in the registry."""


class PoolClosedError(OltError, RuntimeError):
    """Task submitted to a worker pool that has been closed."""


class TaskAbortedError(OltError, RuntimeError):
    """Batch task ended without producing a value or an ordinary exception."""
