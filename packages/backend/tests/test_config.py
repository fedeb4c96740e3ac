"""Settings — required secret, validation, production rules."""

import pytest
from pydantic import ValidationError

from inkwell.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("INKWELL_JWT_SECRET", "INKWELL_ENVIRONMENT", "INKWELL_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_secret_is_required():
    with pytest.raises(ValidationError):
        Settings()


def test_blank_secret_rejected():
    with pytest.raises(ValidationError):
        Settings(jwt_secret="   ")


def test_secret_read_from_env(monkeypatch):
    monkeypatch.setenv("INKWELL_JWT_SECRET", "from-the-environment")
    settings = Settings()
    assert settings.jwt_secret.get_secret_value() == "from-the-environment"
    assert "from-the-environment" not in repr(settings)


def test_defaults():
    settings = Settings(jwt_secret="s")
    assert settings.jwt_expire_minutes == 7 * 24 * 60
    assert settings.jwt_algorithm == "HS256"
    assert settings.environment == "development"
    assert not settings.is_production


def test_production_requires_long_secret():
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(jwt_secret="short", environment="production")


def test_production_forbids_debug():
    with pytest.raises(ValidationError, match="INKWELL_DEBUG"):
        Settings(jwt_secret="x" * 32, environment="production", debug=True)


def test_production_settings_accepted():
    settings = Settings(jwt_secret="x" * 32, environment="production")
    assert settings.is_production


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_bounds(rounds):
    with pytest.raises(ValidationError):
        Settings(jwt_secret="s", bcrypt_rounds=rounds)


def test_expiry_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(jwt_secret="s", jwt_expire_minutes=0)
