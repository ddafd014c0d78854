from __future__ import annotations

import dataclasses

import pytest

from objstore.common import config
from objstore.common.config import DEFAULT_MAX_UPLOAD_SIZE, Settings, get_settings


@pytest.fixture(autouse=True)
def no_env_file(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "ENV_FILE", tmp_path / "missing.env")
    for key in (
        "STORAGE_DIR",
        "MAX_UPLOAD_SIZE",
        "PORT",
        "TLS_CERT_FILE",
        "TLS_KEY_FILE",
        "ENABLE_METRICS",
        "CORS_ORIGINS",
    ):
        # setenv first so monkeypatch also removes values loaded from .env files
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults():
    settings = Settings.from_environment()

    assert settings.STORAGE_DIR == "./storage"
    assert settings.MAX_UPLOAD_SIZE == DEFAULT_MAX_UPLOAD_SIZE == 5 * 1024 * 1024
    assert settings.PORT == 8080
    assert settings.tls_enabled is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_DIR", "/srv/objects")
    monkeypatch.setenv("MAX_UPLOAD_SIZE", "1024")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("ENABLE_METRICS", "off")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    settings = Settings.from_environment()

    assert str(settings.storage_root) == "/srv/objects"
    assert settings.MAX_UPLOAD_SIZE == 1024
    assert settings.PORT == 9000
    assert settings.ENABLE_METRICS is False
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_env_file_does_not_override_environment(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\nSTORAGE_DIR='/from/file'\nPORT=7000\n", encoding="utf-8"
    )
    monkeypatch.setattr(config, "ENV_FILE", env_file)
    monkeypatch.setenv("PORT", "9100")

    settings = Settings.from_environment()

    assert settings.STORAGE_DIR == "/from/file"
    assert settings.PORT == 9100


def test_settings_are_immutable():
    settings = Settings()

    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.STORAGE_DIR = "/elsewhere"  # type: ignore[misc]


def test_rejects_non_positive_upload_ceiling():
    with pytest.raises(ValueError, match="MAX_UPLOAD_SIZE"):
        Settings(MAX_UPLOAD_SIZE=0)


def test_tls_files_must_come_in_pairs():
    with pytest.raises(ValueError, match="together"):
        Settings(TLS_CERT_FILE="cert.pem")

    settings = Settings(TLS_CERT_FILE="cert.pem", TLS_KEY_FILE="key.pem")
    assert settings.tls_enabled is True


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("STORAGE_DIR", "/first")
    first = get_settings()
    monkeypatch.setenv("STORAGE_DIR", "/second")

    assert get_settings() is first
