# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pyolt.lib.types import FileNameStr, PathLike

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
STARTUP_BANNER: str = "==== PyOLT REST API Starting ===="


class LoggerConfigurator:
    """
    Attach file (and optionally console) handlers to the root logger and
    write a startup banner so each run is easy to find in a shared log.
    """

    MAX_BYTES: int      = 10 * 1024 * 1024
    BACKUP_COUNT: int   = 5

    def __init__(self,
                 log_dir: PathLike,
                 log_filename: FileNameStr,
                 level: str = 'INFO', to_console: bool = False, rotate: bool = False
    ) -> None:
        """
        Configure Root Logging.

        Args:
            log_dir: Directory for log files; created if missing.
            log_filename: Log file name, e.g. ``pyolt.log``.
            level: Level name (``DEBUG``, ``INFO``...); unknown names fall back to INFO.
            to_console: Also log to stderr.
            rotate: Use a size-based rotating handler (10 MB, 5 backups).
        """
        self.log_dir = Path(log_dir)
        self.log_filename = log_filename
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.to_console = to_console
        self.rotate = rotate
        self.log_file = self.log_dir / self.log_filename

        self.__setup()

    def __setup(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        handler: logging.Handler
        if self.rotate:
            handler = RotatingFileHandler(self.log_file, maxBytes=self.MAX_BYTES, backupCount=self.BACKUP_COUNT)
        else:
            handler = logging.FileHandler(self.log_file)

        fmt = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(fmt)

        root = logging.getLogger()
        root.setLevel(self.level)
        root.addHandler(handler)

        if self.to_console:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(fmt)
            root.addHandler(console)

        # urllib3 logs every pooled connection at DEBUG
        logging.getLogger("urllib3").setLevel(max(self.level, logging.INFO))

        root.info(STARTUP_BANNER)
