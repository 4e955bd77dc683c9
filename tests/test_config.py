"""
Tests for configuration and KDF parameter validation.
"""

import pytest

from signkeys.config import Config
from signkeys.passphrase import Argon2idDeriver, ScryptDeriver, get_deriver


def test_defaults():
    cfg = Config(KDF="scrypt", SCRYPT_N=32768)
    assert cfg.PASSWORD_ENV == "COSIGN_PASSWORD"
    assert cfg.kdf_params() == {"N": 32768, "r": 8, "p": 1}
    assert set(cfg.kdf_params("argon2id")) == {"time_cost", "memory_cost", "parallelism"}


@pytest.mark.parametrize("kwargs", [
    {"KDF": "pbkdf2"},
    {"SCRYPT_N": 1000},
    {"SCRYPT_N": 2 ** 21},
    {"ARGON2_TIME_COST": 0},
    {"ARGON2_TIME_COST": 1000},
    {"ARGON2_PARALLELISM": 0},
    {"ARGON2_MEMORY_COST": 16, "ARGON2_PARALLELISM": 4},
    {"ARGON2_MEMORY_COST": 2 * 1024 * 1024},
    {"KEY_PREFIX": ""},
])
def test_invalid_values(kwargs):
    """Test bad settings fail when the config is built, not at first use."""
    with pytest.raises(ValueError):
        Config(**kwargs)


def test_get_deriver():
    assert get_deriver("scrypt") is ScryptDeriver
    assert get_deriver("argon2id") is Argon2idDeriver
    with pytest.raises(ValueError):
        get_deriver("pbkdf2")


@pytest.mark.parametrize("deriver,params", [
    (ScryptDeriver, {"N": 1024, "r": 8, "p": 1}),
    (Argon2idDeriver, {"time_cost": 1, "memory_cost": 64, "parallelism": 1}),
])
def test_derive_key_is_deterministic_for_salt(deriver, params):
    key, salt = deriver.derive_key(b"pw", params)

    again, _ = deriver.derive_key(b"pw", params, salt)
    other, _ = deriver.derive_key(b"pw2", params, salt)

    assert len(key) == 32
    assert len(salt) == 32
    assert key == again
    assert key != other


def test_derive_key_rejects_short_salt():
    with pytest.raises(ValueError):
        ScryptDeriver.derive_key(b"pw", {"N": 1024, "r": 8, "p": 1}, b"salt")


@pytest.mark.parametrize("params", [
    {"time_cost": 1, "memory_cost": 64},
    {"time_cost": True, "memory_cost": 64, "parallelism": 1},
    {"time_cost": "1", "memory_cost": 64, "parallelism": 1},
    {"time_cost": 1, "memory_cost": 4, "parallelism": 1},
    {"time_cost": 33, "memory_cost": 64, "parallelism": 1},
    {"time_cost": 1, "memory_cost": 1024, "parallelism": 17},
])
def test_argon2id_check_params_rejects(params):
    with pytest.raises(ValueError):
        Argon2idDeriver.check_params(params)


@pytest.mark.parametrize("params", [
    {"N": 1024, "r": 8},
    {"N": 1, "r": 8, "p": 1},
    {"N": 3000, "r": 8, "p": 1},
    {"N": 2 ** 21, "r": 8, "p": 1},
    {"N": 1024, "r": 33, "p": 1},
    {"N": 1024, "r": 8, "p": 17},
    {"N": 2 ** 20, "r": 9, "p": 1},
])
def test_scrypt_check_params_rejects(params):
    with pytest.raises(ValueError):
        ScryptDeriver.check_params(params)
