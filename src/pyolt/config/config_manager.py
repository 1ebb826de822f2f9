# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, TypeVar

T = TypeVar("T")


class ConfigManager:
    """
    JSON Configuration Store For PyOLT.

    The file is resolved in this order:

    1. ``config_path`` passed by the caller,
    2. the ``PYOLT_CONFIG`` environment variable,
    3. ``settings/system.json`` inside the installed package.

    A missing file is seeded from ``system.json.template`` in the same
    directory when one is present.
    """

    ENV_CONFIG_PATH: str    = "PYOLT_CONFIG"
    CONFIG_DIR: str         = "settings"
    CONFIG_NAME: str        = "system.json"
    TEMPLATE_SUFFIX: str    = ".template"

    def __init__(self, config_path: str | Path | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

        if config_path:
            self._config_path = Path(config_path)
        elif os.environ.get(self.ENV_CONFIG_PATH):
            self._config_path = Path(os.environ[self.ENV_CONFIG_PATH])
        else:
            package_root = Path(__file__).resolve().parent.parent
            self._config_path = package_root / self.CONFIG_DIR / self.CONFIG_NAME

        self._config_data: dict[str, Any] = {}
        self._load()

    def get_config_path(self) -> str:
        """Returns the path to the configuration file."""
        return str(self._config_path)

    def _load(self) -> None:
        actual_path = self._config_path.resolve()

        if not actual_path.exists():
            template = actual_path.with_name(f"{actual_path.name}{self.TEMPLATE_SUFFIX}")
            if template.exists():
                actual_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy(template, actual_path)
                self.logger.info("Seeded configuration %s from %s", actual_path, template)

        if not actual_path.exists():
            raise FileNotFoundError(f"Config file not found: {self._config_path}")

        with actual_path.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {self._config_path} must contain a JSON object")
        self._config_data = data

    def get(self, *keys: str, fallback: T | None = None) -> T | None:
        """
        Retrieves a deeply nested value from the config.

        Args:
            *keys (str): Sequence of keys to traverse the nested dictionary.
            fallback (Optional[Any]): A value to return if any key is not found.

        Returns:
            Any: The value from the configuration or the fallback.

        Example:
            config.get("Scraper", "max_workers")
        """
        data: Any = self._config_data
        for key in keys:
            if not isinstance(data, dict) or key not in data:
                return fallback
            data = data[key]
        return data

    def reload(self) -> None:
        """Reloads the configuration from disk."""
        self._load()

    def as_dict(self) -> dict[str, Any]:
        """Returns the entire configuration as a dictionary."""
        return self._config_data.copy()

    def save(self, new_config: dict[str, Any]) -> None:
        """Overwrites and saves the entire config."""
        self._config_data = new_config
        with self._config_path.open("w", encoding="utf-8") as f:
            json.dump(self._config_data, f, indent=4)
