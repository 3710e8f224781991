"""Tests for configuration management"""

from pathlib import Path

import pytest
import yaml

from dashapi.core.config import ConfigService, ExtractorConfig, ManifestSettings


def _write_config(path: Path, data: dict) -> str:
    with open(path, "w") as f:
        yaml.dump(data, f)
    return str(path)


class TestConfigService:
    """Test ConfigService functionality"""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        """Test loading configuration from YAML file"""
        config_file = _write_config(
            tmp_path / "config.yaml",
            {
                "server": {"host": "127.0.0.1", "port": 9000},
                "extractor": {"player_client": "ios", "retry_backoff": [1, 2]},
                "manifest": {"select_streams": False, "min_buffer_time": "PT1.5S"},
                "logging": {"level": "DEBUG"},
            },
        )

        config = ConfigService(config_file).load()

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 9000
        assert config.extractor.player_client == "ios"
        assert config.extractor.retry_backoff == [1, 2]
        assert config.manifest.select_streams is False
        assert config.manifest.min_buffer_time == "PT1.5S"
        assert config.logging.level == "DEBUG"

    def test_load_with_defaults(self, tmp_path: Path) -> None:
        """Test loading configuration with default values"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("{}")

        config = ConfigService(str(config_file)).load()

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8000
        assert config.timeouts.metadata == 30
        assert config.extractor.binary == "yt-dlp"
        assert config.extractor.player_client == "web"
        assert config.extractor.retry_attempts == 3
        assert config.extractor.retry_backoff == [2, 4, 8]
        assert config.manifest.select_streams is True
        assert config.manifest.min_buffer_time is None
        assert config.logging.format == "json"
        assert config.security.cors_origins == ["*"]

    def test_environment_variable_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test environment variable overrides YAML configuration"""
        config_file = _write_config(
            tmp_path / "config.yaml", {"server": {"host": "127.0.0.1", "port": 8000}}
        )
        monkeypatch.setenv("APP_SERVER_PORT", "9999")

        config = ConfigService(config_file).load()

        assert config.server.port == 9999
        assert config.server.host == "127.0.0.1"

    def test_nested_environment_variable_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test section overrides with environment variables"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("{}")

        monkeypatch.setenv("APP_EXTRACTOR_BINARY", "/opt/bin/yt-dlp")
        monkeypatch.setenv("APP_EXTRACTOR_RETRY_BACKOFF", "[1, 1]")
        monkeypatch.setenv("APP_TIMEOUTS_METADATA", "60")
        monkeypatch.setenv("APP_MANIFEST_SELECT_STREAMS", "false")

        config = ConfigService(str(config_file)).load()

        assert config.extractor.binary == "/opt/bin/yt-dlp"
        assert config.extractor.retry_backoff == [1, 1]
        assert config.timeouts.metadata == 60
        assert config.manifest.select_streams is False

    def test_validation_log_level(self, tmp_path: Path) -> None:
        """Test log level validation"""
        config_file = _write_config(tmp_path / "config.yaml", {"logging": {"level": "INVALID"}})

        with pytest.raises(ValueError, match="level must be one of"):
            ConfigService(config_file).load()

    def test_validation_log_format(self, tmp_path: Path) -> None:
        config_file = _write_config(tmp_path / "config.yaml", {"logging": {"format": "xml"}})

        with pytest.raises(ValueError, match="format must be"):
            ConfigService(config_file).load()

    def test_validation_timeouts_positive(self, tmp_path: Path) -> None:
        config_file = _write_config(tmp_path / "config.yaml", {"timeouts": {"metadata": 0}})

        with pytest.raises(ValueError, match="timeouts must be positive"):
            ConfigService(config_file).load()

    def test_validation_retry_attempts(self, tmp_path: Path) -> None:
        config_file = _write_config(
            tmp_path / "config.yaml", {"extractor": {"retry_attempts": 0}}
        )

        with pytest.raises(ValueError, match="retry_attempts must be at least 1"):
            ConfigService(config_file).load()

    def test_validation_requires_backoff_with_retries(self, tmp_path: Path) -> None:
        """Test validation rejects retries without a backoff schedule"""
        config_file = _write_config(
            tmp_path / "config.yaml",
            {"extractor": {"retry_attempts": 3, "retry_backoff": []}},
        )

        service = ConfigService(config_file)
        service.load()

        with pytest.raises(ValueError, match="retry_backoff must not be empty"):
            service.validate()

    def test_validation_single_attempt_without_backoff(self, tmp_path: Path) -> None:
        config_file = _write_config(
            tmp_path / "config.yaml",
            {"extractor": {"retry_attempts": 1, "retry_backoff": []}},
        )

        service = ConfigService(config_file)
        service.load()

        assert service.validate() is True

    def test_load_nonexistent_file(self) -> None:
        """Test loading when config file doesn't exist uses defaults"""
        config = ConfigService("nonexistent.yaml").load()

        assert config.server.port == 8000
        assert config.logging.level == "INFO"

    def test_config_property_before_load(self) -> None:
        """Test accessing config property before loading raises error"""
        service = ConfigService()

        with pytest.raises(ValueError, match="Configuration not loaded"):
            _ = service.config

    def test_validate_before_load(self) -> None:
        """Test validating before loading raises error"""
        service = ConfigService()

        with pytest.raises(ValueError, match="Configuration not loaded"):
            service.validate()


class TestManifestSettings:
    @pytest.mark.parametrize("value", ["PT2S", "PT1.5S", "PT1M", "PT1H30M"])
    def test_valid_min_buffer_time(self, value: str) -> None:
        assert ManifestSettings(min_buffer_time=value).min_buffer_time == value

    @pytest.mark.parametrize("value", ["PT", "2S", "P1D", "two seconds"])
    def test_invalid_min_buffer_time(self, value: str) -> None:
        with pytest.raises(ValueError, match="ISO 8601"):
            ManifestSettings(min_buffer_time=value)


class TestExtractorConfig:
    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_EXTRACTOR_PLAYER_CLIENT", "android")
        assert ExtractorConfig().player_client == "android"
