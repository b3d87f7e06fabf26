"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from nextbus.config import AppConfig, StorageConfig
from nextbus.domain.models import DayType
from nextbus.domain.phrases import CollectiveDayPolicy, OnTheHourStyle


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("S3_PERSISTENCE_BUCKET", raising=False)
        config = AppConfig()

        assert config.timetables.directory is None
        assert config.phrases.collective_days is CollectiveDayPolicy.AMBIGUOUS
        assert config.phrases.on_the_hour is OnTheHourStyle.OMIT_MINUTES
        assert config.storage.bucket is None
        assert config.storage.expires_seconds == 60

    def test_load_from_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "timetables:\n"
            "  directory: /srv/timetables\n"
            "  saturday: doyou.csv\n"
            "phrases:\n"
            "  collective_days: representative\n"
            "  on_the_hour: always_minutes\n"
            "storage:\n"
            "  region: ap-northeast-1\n"
            "  bucket: skill-assets\n"
            "  expires_seconds: 120\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.timetables.directory == Path("/srv/timetables")
        assert config.timetables.filenames()[DayType.SATURDAY] == "doyou.csv"
        assert config.timetables.filenames()[DayType.WEEKDAY] == "weekday.csv"
        assert config.phrases.collective_days is CollectiveDayPolicy.REPRESENTATIVE
        assert config.phrases.on_the_hour is OnTheHourStyle.ALWAYS_MINUTES
        assert config.storage.region == "ap-northeast-1"
        assert config.storage.bucket == "skill-assets"
        assert config.storage.expires_seconds == 120

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("phrases: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_root_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping at the root level"):
            AppConfig.load_from_yaml(config_path)

    def test_empty_file_gives_defaults(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        assert AppConfig.load_from_yaml(config_path).timetables.cache is False

    def test_timezone_key_is_not_a_setting(self, tmp_path):
        """Answers are always in Japan time; a timezone entry has no effect."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("timezone: America/New_York\n", encoding="utf-8")

        config = AppConfig.load_from_yaml(config_path)

        assert not hasattr(config, "timezone")
        assert config == AppConfig()

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            AppConfig(phrases={"collective_days": "guess"})

    def test_load_without_path_falls_back_to_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert AppConfig.load() == AppConfig()

    def test_load_prefers_config_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text("phrases:\n  on_the_hour: always_minutes\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert AppConfig.load().phrases.on_the_hour is OnTheHourStyle.ALWAYS_MINUTES


class TestStorageConfig:
    """Tests for StorageConfig."""

    def test_environment_defaults(self, monkeypatch):
        monkeypatch.setenv("S3_PERSISTENCE_REGION", "ap-northeast-1")
        monkeypatch.setenv("S3_PERSISTENCE_BUCKET", "from-env")

        storage = StorageConfig()

        assert storage.region == "ap-northeast-1"
        assert storage.bucket == "from-env"

    def test_expiry_must_be_positive(self):
        with pytest.raises(ValueError, match="greater than zero"):
            StorageConfig(bucket="b", expires_seconds=0)
