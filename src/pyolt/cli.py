#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import argparse
import json
import os
import sys

import uvicorn

from pyolt.config.config_manager import ConfigManager
from pyolt.config.system_config_settings import OltConfigSettings
from pyolt.lib.secret.credential_cipher import CredentialCipher, SecretCryptoError
from pyolt.version import __version__ as PYOLT_VERSION


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Launch the PyOLT FastAPI service, or manage its stored device credentials."
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{PYOLT_VERSION}",
        help="Show PyOLT version and exit.",
    )

    parser.add_argument("--config", default=None, help="Path to system.json (default: packaged settings/system.json)")
    parser.add_argument("--host", default=None, help="Host to bind (default: Server.host from config)")
    parser.add_argument("--port", default=None, type=int, help="Port to bind (default: Server.port from config)")

    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Uvicorn log level (default: info).",
    )

    parser.add_argument(
        "--no-access-log",
        action="store_true",
        help="Disable Uvicorn access log.",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on file changes (dev only).",
    )

    parser.add_argument(
        "--generate-key",
        action="store_true",
        help=f"Print a new secret key for {CredentialCipher.ENV_VAR_NAME} and exit.",
    )

    parser.add_argument(
        "--encrypt-passwords",
        action="store_true",
        help="Replace plaintext device passwords in the config with encrypted password_enc values and exit.",
    )
    return parser


def _encrypt_passwords(config: ConfigManager) -> int:
    try:
        updated = CredentialCipher().encrypt_device_passwords(config.as_dict())
    except SecretCryptoError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    config.save(updated)
    print(f"Encrypted device passwords in {config.get_config_path()}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.generate_key:
        print(CredentialCipher.generate_key())
        return 0

    if args.config:
        # create_app() runs in the uvicorn process and resolves the file from here
        os.environ[ConfigManager.ENV_CONFIG_PATH] = os.path.abspath(args.config)

    config = ConfigManager()
    if args.encrypt_passwords:
        return _encrypt_passwords(config)

    settings = OltConfigSettings(config)
    host = args.host or settings.server_host()
    port = args.port or settings.server_port()

    print(json.dumps({"service": "pyolt", "version": PYOLT_VERSION, "url": f"http://{host}:{port}"}))

    uvicorn_args = {
        "app": "pyolt.api.main:create_app",
        "factory": True,
        "host": host,
        "port": port,
        "timeout_keep_alive": 120,
        "log_level": args.log_level,
        "access_log": not args.no_access_log,
    }
    if args.reload:
        uvicorn_args.update({"reload": True, "reload_dirs": ["src"]})

    uvicorn.run(**uvicorn_args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
