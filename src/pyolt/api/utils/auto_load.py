# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import importlib
import logging
import pathlib
import traceback

from fastapi import FastAPI

PACKAGE_NAME: str = "pyolt"


class RouterRegistrar:
    """
    Auto-discovers and registers FastAPI routers by scanning for 'router.py'
    files under pyolt/api/routes. Modules that set ``__skip_autoregister__``
    or expose no ``router`` are skipped; import failures are collected and
    reported once scanning is done.
    """

    def __init__(self, base_dir: pathlib.Path | None = None) -> None:
        self.logger = logging.getLogger(__name__)

        self.package_root = base_dir or pathlib.Path(__file__).resolve()
        while self.package_root.name != PACKAGE_NAME:
            if self.package_root == self.package_root.parent:
                msg = f"Could not find '{PACKAGE_NAME}' directory in path."
                self.logger.error(msg)
                raise RuntimeError(msg)
            self.package_root = self.package_root.parent

        self.routes_path = self.package_root / "api" / "routes"
        if not self.routes_path.exists():
            msg = f"Path not found: {self.routes_path}"
            self.logger.error(msg)
            raise RuntimeError(msg)

        self.errors: list[tuple[str, str]] = []
        self.registered: list[str] = []

    def _module_path(self, router_file: pathlib.Path) -> str:
        relative = router_file.relative_to(self.package_root.parent).with_suffix("")
        return ".".join(relative.parts)

    def register(self, app: FastAPI) -> None:
        """Import every router module below routes_path and include its router."""
        self.logger.debug("Scanning directory for routers: %s", self.routes_path)

        for router_file in sorted(self.routes_path.rglob("router.py")):
            module_path = self._module_path(router_file)
            try:
                module = importlib.import_module(module_path)
            except Exception:
                error_tb = traceback.format_exc()
                self.logger.error("Failed to import router module '%s':\n%s", module_path, error_tb)
                self.errors.append((module_path, error_tb))
                continue

            if getattr(module, "__skip_autoregister__", False):
                self.logger.debug("Skipping non-routable module: %s", module_path)
                continue

            router = getattr(module, "router", None)
            if router is None:
                self.logger.debug("No 'router' attribute in module: %s", module_path)
                continue

            app.include_router(router)
            self.registered.append(module_path)
            self.logger.debug("Registered router from module: %s", module_path)

        self._report_summary()

    def _report_summary(self) -> None:
        if self.errors:
            self.logger.error("Router registration finished with %d error(s): %s",
                              len(self.errors), ", ".join(module for module, _ in self.errors))
        else:
            self.logger.debug("Registered %d router(s) without errors.", len(self.registered))
