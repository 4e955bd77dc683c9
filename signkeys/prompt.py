"""
Ready-made passphrase callbacks.

Each callback takes ``confirm`` (True when a new passphrase is being chosen)
and returns the passphrase as bytes.
"""

import os
import getpass
from typing import Optional

from .config import config
from .keys import PassFunc


class PassphraseUnavailableError(RuntimeError):
    """No passphrase could be obtained."""


class PassphraseMismatchError(ValueError):
    """The passphrase and its confirmation differ."""


def static_pass_func(passphrase: bytes) -> PassFunc:
    """Callback that always returns the same passphrase."""
    def pass_func(confirm: bool) -> bytes:
        return passphrase
    return pass_func


def env_pass_func(var: Optional[str] = None) -> PassFunc:
    """
    Callback reading the passphrase from an environment variable.

    Args:
        var: Variable name, defaults to config.PASSWORD_ENV

    Raises (from the callback):
        PassphraseUnavailableError: If the variable is not set
    """
    var = var or config.PASSWORD_ENV

    def pass_func(confirm: bool) -> bytes:
        value = os.environ.get(var)
        if value is None:
            raise PassphraseUnavailableError(f"{var} is not set")
        return value.encode("utf-8")
    return pass_func


def terminal_pass_func(confirm: bool) -> bytes:
    """Prompt on the terminal, asking twice when confirm is True."""
    passphrase = getpass.getpass("Enter password for private key: ")
    if confirm:
        again = getpass.getpass("Enter password for private key again: ")
        if again != passphrase:
            raise PassphraseMismatchError("passwords do not match")
    return passphrase.encode("utf-8")


def default_pass_func(confirm: bool) -> bytes:
    """Use the password environment variable when set, else prompt."""
    if config.PASSWORD_ENV in os.environ:
        return env_pass_func()(confirm)
    return terminal_pass_func(confirm)
