# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import os

from pyolt.config.log_config import LoggerConfigurator
from pyolt.config.system_config_settings import OltConfigSettings
from pyolt.startup.runtime import OltRuntime


class StartUp:
    """
    Prepare the process before the API starts: logging first, then the
    service graph.
    """

    @classmethod
    def initialize(cls, settings: OltConfigSettings | None = None) -> OltRuntime:
        """
        Configure Logging And Build The Runtime.

        Console logging is enabled automatically inside containers.
        """
        settings = settings if settings is not None else OltConfigSettings()

        in_docker = os.path.exists('/.dockerenv') or bool(os.environ.get('DOCKER_CONTAINER'))

        LoggerConfigurator(settings.log_dir(),
                           settings.log_filename(),
                           settings.log_level(),
                           to_console=in_docker)

        return OltRuntime.build(settings)
