import pytest
from pydantic import ValidationError

from fitness_api.config import Settings


def test_missing_secret_fails_startup(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_empty_secret_is_rejected(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_legacy_jwt_secret_name_is_accepted(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.setenv("JWT_SECRET", "from-legacy-name")
    assert Settings(_env_file=None).secret_key == "from-legacy-name"


def test_cors_origins_parsing(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:8081, http://10.0.2.2:8081,")
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["http://localhost:8081", "http://10.0.2.2:8081"]
    assert settings.access_token_expire_minutes == 60 * 24 * 7
