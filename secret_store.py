"""
Title: Password Secret Stores
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Provides the SecretStore implementations used by the guard. The keyring-backed
store persists the single user password in the operating system credential
store; the in-memory store backs simulation runs and tests.

Scope and Limitations:
- Exactly one secret is stored, under a fixed key.
- Backend read failures surface as SecretUnavailable so a triggered alarm keeps
  sounding; write failures surface as SecretStoreError.
- No hashing is applied; the secret is compared by exact string equality.

Dependencies:
- Python 3.10+
- keyring
"""

import logging
import threading

import keyring
from keyring.errors import KeyringError

from guard_errors import SecretStoreError, SecretUnavailable
from platform_services import SecretStore

logger = logging.getLogger(__name__)


class InMemorySecretStore(SecretStore):
    def __init__(self, initial: str | None = None):
        self._value = initial
        self._lock = threading.Lock()

    def set(self, value: str) -> None:
        with self._lock:
            self._value = str(value)

    def get(self) -> str | None:
        with self._lock:
            return self._value


class KeyringSecretStore(SecretStore):
    def __init__(self, service: str = "tripwire", key: str = "userPassword"):
        self._service = service
        self._key = key

    @property
    def service(self) -> str:
        return self._service

    @property
    def key(self) -> str:
        return self._key

    def set(self, value: str) -> None:
        try:
            keyring.set_password(self._service, self._key, str(value))
        except KeyringError as e:
            logger.error("Keyring write failed for %s/%s: %s", self._service, self._key, e)
            raise SecretStoreError(f"Password could not be saved: {e}") from e

    def get(self) -> str | None:
        try:
            return keyring.get_password(self._service, self._key)
        except KeyringError as e:
            logger.error("Keyring read failed for %s/%s: %s", self._service, self._key, e)
            raise SecretUnavailable() from e
