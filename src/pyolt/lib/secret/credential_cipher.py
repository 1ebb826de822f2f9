# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 Maurice Garcia

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken


class SecretCryptoError(Exception):
    """
    Device Credential Encryption/Decryption Failure.

    Raised when a stored device password cannot be encrypted or decrypted:
    missing key, malformed token, unsupported token version or a token that
    fails Fernet's integrity check.
    """


class CredentialCipher:
    """
    Fernet Cipher For Device Passwords Kept In system.json.

    Encrypted passwords are stored under ``password_enc`` as::

        ENC[v1]:<fernet-token>

    The key never lives in the config file. It is read from ``key_path``
    (default ``~/.ssh/pyolt_secrets.key``) or, when that file is missing,
    from the ``PYOLT_SECRET_KEY`` environment variable.
    """

    ENV_VAR_NAME: str       = "PYOLT_SECRET_KEY"
    KEY_FILE_NAME: str      = "pyolt_secrets.key"
    TOKEN_VERSION: str      = "v1"
    TOKEN_PREFIX: str       = "ENC["
    TOKEN_DELIMITER: str    = "]:"

    def __init__(self, key_path: Path | None = None, env_var_name: str = ENV_VAR_NAME) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._key_path = key_path if key_path is not None else Path.home() / ".ssh" / self.KEY_FILE_NAME
        self._env_var_name = env_var_name

    @classmethod
    def is_encrypted(cls, value: str) -> bool:
        return value.strip().startswith(cls.TOKEN_PREFIX)

    @staticmethod
    def generate_key() -> str:
        """Return a new URL-safe base64 Fernet key."""
        return Fernet.generate_key().decode("utf-8")

    def _fernet(self) -> Fernet:
        key = ""
        if self._key_path.is_file():
            key = self._key_path.read_text(encoding="utf-8").strip()
        if key == "":
            key = os.environ.get(self._env_var_name, "").strip()
        if key == "":
            raise SecretCryptoError(
                f"Missing secret key. Provide key file '{self._key_path}' or set environment variable '{self._env_var_name}'.")
        try:
            return Fernet(key.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            raise SecretCryptoError(f"Secret key is not a valid Fernet key: {exc}") from exc

    def encrypt(self, password: str) -> str:
        """
        Encrypt A Plaintext Password Into A Versioned ``ENC[...]`` Token.

        Raises:
            SecretCryptoError: If the password is empty or no key is available.
        """
        clear = password.strip()
        if clear == "":
            raise SecretCryptoError("Password is empty; refusing to encrypt empty value.")
        payload = self._fernet().encrypt(clear.encode("utf-8")).decode("utf-8")
        return f"{self.TOKEN_PREFIX}{self.TOKEN_VERSION}{self.TOKEN_DELIMITER}{payload}"

    def decrypt(self, token: str) -> str:
        """
        Decrypt An ``ENC[v1]:...`` Token Back To The Plaintext Password.

        Raises:
            SecretCryptoError: On malformed token, unsupported version, missing
                key or integrity failure.
        """
        text = token.strip()
        if not text.startswith(self.TOKEN_PREFIX):
            raise SecretCryptoError("Encrypted token missing expected 'ENC[...]:...' prefix.")
        end = text.find(self.TOKEN_DELIMITER)
        if end < 0:
            raise SecretCryptoError("Encrypted token missing closing ']:' delimiter.")

        version = text[len(self.TOKEN_PREFIX):end].strip()
        payload = text[end + len(self.TOKEN_DELIMITER):].strip()
        if version != self.TOKEN_VERSION:
            raise SecretCryptoError(f"Unsupported encrypted token version '{version}'. Allowed: {self.TOKEN_VERSION}")
        if payload == "":
            raise SecretCryptoError("Encrypted token payload is empty.")

        try:
            clear = self._fernet().decrypt(payload.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise SecretCryptoError("Failed to decrypt password: invalid token or wrong secret key.") from exc
        return clear.strip()

    def encrypt_device_passwords(self, config: dict[str, Any]) -> dict[str, Any]:
        """
        Move Every Plaintext Device Password Into ``password_enc``.

        Walks the ``Devices`` list of a system.json document; after the call
        no device entry carries a ``password`` key. Already-encrypted values
        are left untouched.
        """
        devices = config.get("Devices", [])
        if not isinstance(devices, list):
            return config

        for device in devices:
            if not isinstance(device, dict):
                continue
            password = str(device.get("password", "") or "").strip()
            if password:
                device["password_enc"] = password if self.is_encrypted(password) else self.encrypt(password)
                self.logger.debug("Encrypted stored password for device '%s'", device.get("id", "?"))
            device.pop("password", None)

        return config
