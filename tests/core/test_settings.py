"""Tests for iam_app.core.settings: defaults, env overrides, validation."""

import pytest

from iam_app.core.errors import ConfigError
from iam_app.core.settings import Edition, IamAppSettings, clear_settings_cache, get_settings


class TestDefaults:
    def test_server_defaults(self, settings):
        assert settings.address == "127.0.0.1:1729"
        assert settings.database == "sample_app_db"
        assert settings.edition == Edition.CORE
        assert settings.is_cloud is False
        assert settings.expected_user_count == 3

    def test_bundled_dataset_files(self, settings):
        assert settings.schema_file.name == "iam-schema.tql"
        assert settings.data_file.name == "iam-data-single-query.tql"
        assert settings.schema_file.read_text().lstrip().startswith("define")
        assert settings.data_file.read_text().lstrip().startswith("insert")


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("IAM_ADDRESS", "typedb.internal:1729")
        monkeypatch.setenv("IAM_EDITION", "cloud")
        settings = IamAppSettings()
        assert settings.address == "typedb.internal:1729"
        assert settings.is_cloud is True

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("IAM_DATABASE=other_db\n")
        assert IamAppSettings().database == "other_db"

    def test_cloud_requires_credentials(self, monkeypatch):
        monkeypatch.setenv("IAM_EDITION", "cloud")
        monkeypatch.setenv("IAM_PASSWORD", "")
        with pytest.raises(ValueError):
            IamAppSettings()

    def test_bad_log_format(self, monkeypatch):
        monkeypatch.setenv("IAM_LOG_FORMAT", "xml")
        with pytest.raises(ValueError):
            IamAppSettings()

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("IAM_LOG_LEVEL", "debug")
        assert IamAppSettings().log_level == "DEBUG"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("IAM_LOG_LEVEL", "verbose")
        with pytest.raises(ValueError):
            IamAppSettings()


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_clear_cache(self, monkeypatch):
        get_settings()
        monkeypatch.setenv("IAM_DATABASE", "after_clear")
        clear_settings_cache()
        assert get_settings().database == "after_clear"

    def test_invalid_config_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("IAM_EXPECTED_USER_COUNT", "-1")
        with pytest.raises(ConfigError):
            get_settings()

    def test_unknown_log_level_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("IAM_LOG_LEVEL", "verbose")
        with pytest.raises(ConfigError) as info:
            get_settings()
        assert info.value.code == "CONFIG"
