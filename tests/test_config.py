"""Tests for settings loading."""

from pathlib import Path

import pytest

from blockcms.config import (
    Settings,
    build_settings,
    get_config_path,
    interpolate_env_vars,
    load_app_config,
)


@pytest.fixture(autouse=True)
def secret_key(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")


class TestInterpolateEnvVars:
    def test_replaces_nested_values(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.internal")

        result = interpolate_env_vars({
            "db": {"url": "postgresql+asyncpg://u@$DB_HOST/cms"},
            "hosts": ["$DB_HOST", 5],
        })

        assert result == {
            "db": {"url": "postgresql+asyncpg://u@db.internal/cms"},
            "hosts": ["db.internal", 5],
        }

    def test_missing_variable_raises(self, monkeypatch):
        monkeypatch.delenv("NOPE_NOT_SET", raising=False)

        with pytest.raises(ValueError, match="NOPE_NOT_SET"):
            interpolate_env_vars("$NOPE_NOT_SET")

    def test_lowercase_is_left_alone(self):
        assert interpolate_env_vars("$lower") == "$lower"


class TestConfigPath:
    def test_default_is_cwd(self, monkeypatch, tmp_path):
        monkeypatch.delenv("BLOCKCMS_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_config_path() == tmp_path / "app.yaml"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BLOCKCMS_CONFIG", "/etc/blockcms/site.yaml")

        assert get_config_path() == Path("/etc/blockcms/site.yaml")


class TestLoadAppConfig:
    def test_loads_yaml(self, temp_app_yaml, monkeypatch):
        monkeypatch.setenv("SITE_NAME", "Acme")
        path = temp_app_yaml({"site": {"name": "$SITE_NAME"}})

        assert load_app_config(path) == {"site": {"name": "Acme"}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_app_config(tmp_path / "absent.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("")

        assert load_app_config(path) == {}


class TestBuildSettings:
    def test_defaults(self):
        settings = build_settings()

        assert isinstance(settings, Settings)
        assert settings.secret_key == "test-secret"
        assert settings.rendering.collection_failure_policy == "empty"
        assert settings.rendering.fallback_collection_limit == 100
        assert settings.logfire.enabled is False

    def test_yaml_sections_override(self):
        settings = build_settings({
            "debug": True,
            "site": {"name": "Acme", "base_url": "https://acme.test"},
            "rendering": {"collection_failure_policy": "raise"},
        })

        assert settings.debug is True
        assert settings.site.name == "Acme"
        assert settings.rendering.collection_failure_policy == "raise"
        assert settings.db.url.startswith("sqlite+aiosqlite")

    @pytest.mark.parametrize("value, expected", [("false", False), ("true", True), ("0", False), (False, False)])
    def test_debug_from_yaml_is_parsed_as_bool(self, value, expected):
        assert build_settings({"debug": value}).debug is expected

    def test_bad_debug_value_rejected(self):
        with pytest.raises(ValueError):
            build_settings({"debug": "sometimes"})

    def test_bad_policy_rejected(self):
        with pytest.raises(ValueError):
            build_settings({"rendering": {"collection_failure_policy": "ignore"}})
