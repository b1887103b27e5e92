"""Unit tests for environment-driven configuration helpers."""

from __future__ import annotations

from excursion_api.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FEATURE_FLAG", "Yes")
    assert env_bool("FEATURE_FLAG") is True
    monkeypatch.setenv("FEATURE_FLAG", "0")
    assert env_bool("FEATURE_FLAG", True) is False
    monkeypatch.delenv("FEATURE_FLAG")
    assert env_bool("FEATURE_FLAG", True) is True


def test_env_int(monkeypatch):
    monkeypatch.setenv("SOME_MINUTES", "30")
    assert env_int("SOME_MINUTES", 15) == 30
    monkeypatch.setenv("SOME_MINUTES", " ")
    assert env_int("SOME_MINUTES", 15) == 15


def test_get_config_selects_by_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config() is ProductionConfig
    monkeypatch.setenv("APP_ENV", "Testing")
    assert get_config() is TestingConfig
    monkeypatch.setenv("APP_ENV", "unknown")
    assert get_config() is DevelopmentConfig


def test_jwt_extension_settings_follow_signing_settings():
    assert TestingConfig.JWT_SECRET_KEY == TestingConfig.JWT_SECURITY_KEY
    assert TestingConfig.JWT_DECODE_ISSUER == TestingConfig.JWT_VALID_ISSUER
    assert TestingConfig.JWT_DECODE_AUDIENCE == TestingConfig.JWT_VALID_AUDIENCE
    assert TestingConfig.JWT_ALGORITHM == "HS256"
