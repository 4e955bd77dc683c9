"""
Tests for passphrase callbacks.
"""

import pytest

from signkeys import prompt
from signkeys.prompt import (
    PassphraseMismatchError,
    PassphraseUnavailableError,
    default_pass_func,
    env_pass_func,
    static_pass_func,
    terminal_pass_func,
)


def _fake_getpass(monkeypatch, answers):
    answers = iter(answers)
    prompts = []

    def getpass(message):
        prompts.append(message)
        return next(answers)

    monkeypatch.setattr(prompt.getpass, "getpass", getpass)
    return prompts


def test_static_pass_func():
    pass_func = static_pass_func(b"pw")
    assert pass_func(True) == b"pw"
    assert pass_func(False) == b"pw"


def test_env_pass_func(monkeypatch):
    monkeypatch.setenv("COSIGN_PASSWORD", "from-env")
    assert env_pass_func()(True) == b"from-env"


def test_env_pass_func_custom_var(monkeypatch):
    monkeypatch.setenv("MY_KEY_PASSWORD", "")
    assert env_pass_func("MY_KEY_PASSWORD")(False) == b""


def test_env_pass_func_unset(monkeypatch):
    monkeypatch.delenv("COSIGN_PASSWORD", raising=False)
    with pytest.raises(PassphraseUnavailableError):
        env_pass_func()(False)


def test_terminal_pass_func_confirm(monkeypatch):
    """Test a new passphrase is asked for twice."""
    prompts = _fake_getpass(monkeypatch, ["secret", "secret"])
    assert terminal_pass_func(True) == b"secret"
    assert len(prompts) == 2


def test_terminal_pass_func_mismatch(monkeypatch):
    _fake_getpass(monkeypatch, ["secret", "secrat"])
    with pytest.raises(PassphraseMismatchError):
        terminal_pass_func(True)


def test_terminal_pass_func_no_confirm(monkeypatch):
    prompts = _fake_getpass(monkeypatch, ["secret"])
    assert terminal_pass_func(False) == b"secret"
    assert len(prompts) == 1


def test_default_pass_func_prefers_env(monkeypatch):
    monkeypatch.setenv("COSIGN_PASSWORD", "from-env")
    _fake_getpass(monkeypatch, [])
    assert default_pass_func(True) == b"from-env"


def test_default_pass_func_falls_back_to_terminal(monkeypatch):
    monkeypatch.delenv("COSIGN_PASSWORD", raising=False)
    _fake_getpass(monkeypatch, ["typed"])
    assert default_pass_func(False) == b"typed"
