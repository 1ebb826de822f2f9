# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pyolt.api.routes.common.envelope import failure
from pyolt.lib.exceptions import (
    AuthenticationFailedError,
    DeviceNotFoundError,
    FieldDecodeError,
    InvalidIdentifierError,
    MalformedRecordError,
    NotFoundError,
    OltError,
    PoolClosedError,
    RequestFailedError,
    UnsupportedActionError,
)
from pyolt.lib.secret.credential_cipher import SecretCryptoError

logger = logging.getLogger(__name__)

# Most specific first: AuthenticationFailedError is a RequestFailedError
ERROR_STATUS: tuple[tuple[type[Exception], HTTPStatus], ...] = (
    (AuthenticationFailedError, HTTPStatus.UNAUTHORIZED),
    (RequestFailedError,        HTTPStatus.BAD_GATEWAY),
    (NotFoundError,             HTTPStatus.BAD_GATEWAY),
    (MalformedRecordError,      HTTPStatus.BAD_GATEWAY),
    (FieldDecodeError,          HTTPStatus.BAD_GATEWAY),
    (InvalidIdentifierError,    HTTPStatus.BAD_REQUEST),
    (UnsupportedActionError,    HTTPStatus.BAD_REQUEST),
    (DeviceNotFoundError,       HTTPStatus.NOT_FOUND),
    (PoolClosedError,           HTTPStatus.SERVICE_UNAVAILABLE),
    (SecretCryptoError,         HTTPStatus.INTERNAL_SERVER_ERROR),
)


def status_for(exc: Exception) -> HTTPStatus:
    for exc_type, status in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


def _device_id(request: Request) -> str | None:
    value = request.path_params.get("device_id")
    return str(value) if value else None


async def _handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    status = status_for(exc)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    body = failure(str(exc), device_id=_device_id(request))
    return JSONResponse(status_code=status, content=body.model_dump(mode="json", exclude_none=True))


async def _handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    detail = exc.errors() if isinstance(exc, RequestValidationError) else str(exc)
    body = failure(f"Invalid request: {detail}", device_id=_device_id(request))
    return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=body.model_dump(mode="json", exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OltError, _handle_domain_error)
    app.add_exception_handler(SecretCryptoError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
