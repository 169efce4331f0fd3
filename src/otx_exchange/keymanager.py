"""Where the CLI finds the OTX API key.

The key is read from ``OTX_API_KEY`` when set, otherwise from the system
keychain entry written by ``otx-exchange keys set``. The client itself
never reads either; callers pass the key to ``ExchangeClient.set_api_key``.
"""

from __future__ import annotations

import logging
import os

import keyring
import keyring.errors

logger = logging.getLogger(__name__)

ENV_VAR = "OTX_API_KEY"
SERVICE_NAME = "otx-exchange"
KEYCHAIN_ENTRY = "api-key"

SOURCE_ENVIRONMENT = "environment"
SOURCE_KEYCHAIN = "keychain"


def _from_keychain() -> str | None:
    try:
        return keyring.get_password(SERVICE_NAME, KEYCHAIN_ENTRY) or None
    except keyring.errors.KeyringError as e:
        logger.warning(f"Keychain unavailable: {e}")
        return None


def get_api_key() -> str | None:
    """The configured key, or None. The environment wins over the keychain."""
    return os.environ.get(ENV_VAR) or _from_keychain()


def key_source() -> str | None:
    """Name where the key would be loaded from, without returning it."""
    if os.environ.get(ENV_VAR):
        return SOURCE_ENVIRONMENT
    if _from_keychain():
        return SOURCE_KEYCHAIN
    return None


def store_api_key(value: str) -> None:
    """Save the key in the keychain.

    Raises:
        ValueError: the value is blank.
        keyring.errors.KeyringError: the keychain rejected the write.
    """
    value = value.strip()
    if not value:
        raise ValueError("Refusing to store an empty API key")
    keyring.set_password(SERVICE_NAME, KEYCHAIN_ENTRY, value)
    logger.info("Stored OTX API key in system keychain")


def delete_api_key() -> bool:
    """Remove the keychain entry. Returns False when there was none."""
    try:
        keyring.delete_password(SERVICE_NAME, KEYCHAIN_ENTRY)
    except keyring.errors.PasswordDeleteError:
        return False
    logger.info("Deleted OTX API key from system keychain")
    return True
