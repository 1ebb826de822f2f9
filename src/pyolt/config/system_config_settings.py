# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

from pyolt.config.config_manager import ConfigManager
from pyolt.lib.types import FileNameStr, TtlSeconds


class OltConfigSettings:
    """
    Typed View Over ``system.json``.

    Each accessor reads through the wrapped ``ConfigManager`` on every call,
    so ``reload()`` takes effect immediately. Missing or invalid values are
    logged at ERROR and replaced by the documented default.
    """

    _DEFAULT_SERVER_HOST: str       = "0.0.0.0"
    _DEFAULT_SERVER_PORT: int       = 3000
    _DEFAULT_CACHE_ENABLED: bool    = True
    _DEFAULT_CACHE_TTL: int         = 60
    _DEFAULT_CACHE_BACKEND: str     = "memory"
    _DEFAULT_CACHE_JSON_PATH: str   = ".data/cache.json"
    _DEFAULT_TIMEOUT: int           = 60
    _DEFAULT_MAX_WORKERS: int       = 200
    _DEFAULT_HISTORY_ENABLED: bool  = True
    _DEFAULT_HISTORY_BACKEND: str   = "memory"
    _DEFAULT_HISTORY_JSON_PATH: str = ".data/onu_history.json"
    _DEFAULT_HISTORY_MAX: int       = 10000
    _DEFAULT_LOG_LEVEL: str         = "INFO"
    _DEFAULT_LOG_DIR: str           = "logs"
    _DEFAULT_LOG_FILENAME: str      = "pyolt.log"

    CACHE_BACKENDS: tuple[str, ...]     = ("memory", "json")
    HISTORY_BACKENDS: tuple[str, ...]   = ("memory", "json")

    def __init__(self, cfg: ConfigManager | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._cfg = cfg if cfg is not None else ConfigManager()

    @property
    def config_manager(self) -> ConfigManager:
        return self._cfg

    @staticmethod
    def _config_path(*path: str) -> str:
        """Return dotted path for logging."""
        return ".".join(path)

    def _get_str(self, default: str, *path: str) -> str:
        value = self._cfg.get(*path)
        if value is None:
            self.logger.error(
                "Missing configuration value for '%s'; using default '%s'",
                self._config_path(*path), default)
            return default
        if not isinstance(value, str):
            coerced = str(value)
            self.logger.error(
                "Non-string configuration value for '%s': %r; using coerced '%s'",
                self._config_path(*path), value, coerced)
            return coerced
        if value.strip() == "":
            self.logger.error(
                "Empty configuration value for '%s'; using default '%s'",
                self._config_path(*path), default)
            return default
        return value

    def _get_int(self, default: int, *path: str, minimum: int | None = None) -> int:
        value = self._cfg.get(*path)
        if value is None:
            self.logger.error(
                "Missing configuration value for '%s'; using default %d",
                self._config_path(*path), default)
            return default
        try:
            number = int(value)
        except (TypeError, ValueError):
            self.logger.error(
                "Invalid integer configuration value for '%s': %r; using default %d",
                self._config_path(*path), value, default)
            return default
        if minimum is not None and number < minimum:
            self.logger.error(
                "Out-of-range configuration value for '%s': %d < %d; using default %d",
                self._config_path(*path), number, minimum, default)
            return default
        return number

    def _get_bool(self, default: bool, *path: str) -> bool:
        value = self._cfg.get(*path)
        if isinstance(value, bool):
            return value
        if value is None:
            self.logger.error(
                "Missing configuration value for '%s'; using default %s",
                self._config_path(*path), default)
            return default

        text = str(value).strip().lower()
        if text in ("1", "true", "yes", "on"):
            return True
        if text in ("0", "false", "no", "off"):
            return False

        self.logger.error(
            "Invalid boolean configuration value for '%s': %r; using default %s",
            self._config_path(*path), value, default)
        return default

    def get_config_path(self) -> str:
        return self._cfg.get_config_path()

    def reload(self) -> None:
        self._cfg.reload()

    # Server
    def server_host(self) -> str:
        return self._get_str(self._DEFAULT_SERVER_HOST, "Server", "host")

    def server_port(self) -> int:
        return self._get_int(self._DEFAULT_SERVER_PORT, "Server", "port", minimum=1)

    # Cache
    def cache_enabled(self) -> bool:
        return self._get_bool(self._DEFAULT_CACHE_ENABLED, "Cache", "enabled")

    def cache_ttl(self) -> TtlSeconds:
        return TtlSeconds(float(self._get_int(self._DEFAULT_CACHE_TTL, "Cache", "ttl_seconds", minimum=0)))

    def cache_backend(self) -> str:
        backend = self._get_str(self._DEFAULT_CACHE_BACKEND, "Cache", "backend").strip().lower()
        if backend not in self.CACHE_BACKENDS:
            self.logger.error(
                "Unsupported cache backend '%s' for 'Cache.backend'; using default '%s'",
                backend, self._DEFAULT_CACHE_BACKEND)
            return self._DEFAULT_CACHE_BACKEND
        return backend

    def cache_json_path(self) -> Path:
        return Path(self._get_str(self._DEFAULT_CACHE_JSON_PATH, "Cache", "json_path"))

    # Scraper
    def scraper_timeout(self) -> float:
        return float(self._get_int(self._DEFAULT_TIMEOUT, "Scraper", "timeout_seconds", minimum=1))

    def scraper_max_workers(self) -> int:
        return self._get_int(self._DEFAULT_MAX_WORKERS, "Scraper", "max_workers", minimum=1)

    # ONU history
    def history_enabled(self) -> bool:
        return self._get_bool(self._DEFAULT_HISTORY_ENABLED, "History", "enabled")

    def history_backend(self) -> str:
        backend = self._get_str(self._DEFAULT_HISTORY_BACKEND, "History", "backend").strip().lower()
        if backend not in self.HISTORY_BACKENDS:
            self.logger.error(
                "Unsupported history backend '%s' for 'History.backend'; using default '%s'",
                backend, self._DEFAULT_HISTORY_BACKEND)
            return self._DEFAULT_HISTORY_BACKEND
        return backend

    def history_json_path(self) -> Path:
        return Path(self._get_str(self._DEFAULT_HISTORY_JSON_PATH, "History", "json_path"))

    def history_max_entries(self) -> int:
        """Snapshots kept per device before the oldest are dropped."""
        return self._get_int(self._DEFAULT_HISTORY_MAX, "History", "max_entries_per_device", minimum=1)

    # Logging
    def log_level(self) -> str:
        return self._get_str(self._DEFAULT_LOG_LEVEL, "Logging", "level")

    def log_dir(self) -> str:
        return self._get_str(self._DEFAULT_LOG_DIR, "Logging", "dir")

    def log_filename(self) -> FileNameStr:
        return cast(FileNameStr, self._get_str(self._DEFAULT_LOG_FILENAME, "Logging", "filename"))

    # Devices
    def device_entries(self) -> list[dict[str, Any]]:
        """
        Return The Raw ``Devices`` Objects.

        Non-object entries are skipped with an error; a missing list yields
        no devices.
        """
        value = self._cfg.get("Devices")
        if value is None:
            return []
        if not isinstance(value, list):
            self.logger.error("Invalid configuration value for 'Devices': expected a list, got %s",
                              type(value).__name__)
            return []

        entries: list[dict[str, Any]] = []
        for position, entry in enumerate(value):
            if not isinstance(entry, dict):
                self.logger.error("Skipping non-object entry at 'Devices[%d]'", position)
                continue
            entries.append(entry)
        return entries
