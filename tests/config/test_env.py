from __future__ import annotations

import logging

import pytest

from populators.config import (
    ConfigurationError,
    DatabaseConfig,
    MissingConfigurationError,
    env_flag,
    get_database_config,
    optional_env_var,
    require_env_var,
    require_env_vars,
    resolve_log_level,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)
    assert isinstance(exc.value, ConfigurationError)


def test_require_env_var_rejects_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_env_var_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPTIONAL_VAR", raising=False)

    assert optional_env_var("OPTIONAL_VAR") is None
    assert optional_env_var("OPTIONAL_VAR", "fallback") == "fallback"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("true", True), ("YES", True), ("off", False), ("0", False), ("", False)],
)
def test_env_flag_parses_booleans(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool  # noqa: FBT001
) -> None:
    monkeypatch.setenv("FLAG_VAR", raw)

    assert env_flag("FLAG_VAR") is expected


def test_env_flag_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLAG_VAR", "maybe")

    with pytest.raises(ConfigurationError, match="FLAG_VAR"):
        env_flag("FLAG_VAR")


def test_env_flag_default_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLAG_VAR", raising=False)

    assert env_flag("FLAG_VAR", default=True) is True


def test_get_database_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POPULATORS_DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("POPULATORS_SQL_ECHO", "true")

    assert get_database_config() == DatabaseConfig(uri="sqlite+pysqlite:///:memory:", echo=True)


def test_get_database_config_requires_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POPULATORS_DATABASE_URI", raising=False)

    with pytest.raises(MissingConfigurationError, match="POPULATORS_DATABASE_URI"):
        get_database_config()


def test_resolve_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POPULATORS_LOG_LEVEL", raising=False)
    assert resolve_log_level() == logging.INFO

    monkeypatch.setenv("POPULATORS_LOG_LEVEL", "debug")
    assert resolve_log_level() == logging.DEBUG

    monkeypatch.setenv("POPULATORS_LOG_LEVEL", "15")
    assert resolve_log_level() == 15

    monkeypatch.setenv("POPULATORS_LOG_LEVEL", "chatty")
    with pytest.raises(ConfigurationError):
        resolve_log_level()
