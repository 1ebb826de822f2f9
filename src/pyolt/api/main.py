# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from pyolt.api.routes.common.envelope import ApiResponse, success
from pyolt.api.routes.common.error_handlers import register_exception_handlers
from pyolt.api.utils.auto_load import RouterRegistrar
from pyolt.startup.runtime import OltRuntime
from pyolt.startup.startup import StartUp
from pyolt.version import __version__

fast_api_description = """
**OLT Web-Management Adapter**

PyOLT reads the HTML management pages of EPON OLTs, extracts the
pseudo-array data they embed and serves it as typed JSON.

**Core capabilities include:**
- PON port listing and per-port ONU inventories with optical metrics
- Concurrent inventory of every port of a device, with per-port errors
- ONU detail, rename, reboot/activate/deactivate/factory/clean-loop and delete
- System information and save-config
- Time-to-live response caching, invalidated on every ONU change
"""


def create_app(runtime: OltRuntime | None = None) -> FastAPI:
    """
    Build The FastAPI Application.

    Without ``runtime`` the process is initialized from system.json
    (logging included). Tests pass a prebuilt runtime instead.
    """
    if runtime is None:
        runtime = StartUp.initialize()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        runtime.close()

    app = FastAPI(
        title="PyOLT REST API",
        version=__version__,
        description=fast_api_description,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    @app.get("/health", tags=["health"], response_model=ApiResponse, response_model_exclude_none=True)
    def health() -> ApiResponse:
        """Lightweight health endpoint for probes."""
        return success({"status": "healthy", "service": "pyolt", "version": __version__}, message="OK")

    app.add_middleware(GZipMiddleware, minimum_size=100_000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    RouterRegistrar().register(app)
    return app
