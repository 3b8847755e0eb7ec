"""
Tests for settings resolution.
"""

from pathlib import Path

import pytest

from domcp.core.config import DEFAULT_DB_PATH, load_settings
from domcp.core.errors import DomcpError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text('[store]\ndb_path = "/data/models.db"\n\n[logging]\nlevel = "debug"\n')
    return path


class TestLoadSettings:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.toml", environ={})

        assert settings.db_path == DEFAULT_DB_PATH
        assert settings.log_level == "INFO"

    def test_config_file(self, config_file: Path) -> None:
        settings = load_settings(config_file, environ={})

        assert settings.db_path == Path("/data/models.db")
        assert settings.log_level == "DEBUG"

    def test_environment_overrides_file(self, config_file: Path) -> None:
        settings = load_settings(
            config_file,
            environ={"DOMCP_DB_PATH": "/env/models.db", "DOMCP_LOG_LEVEL": "warning"},
        )

        assert settings.db_path == Path("/env/models.db")
        assert settings.log_level == "WARNING"

    def test_empty_environment_values_ignored(self, config_file: Path) -> None:
        settings = load_settings(config_file, environ={"DOMCP_DB_PATH": ""})
        assert settings.db_path == Path("/data/models.db")

    def test_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[logging]\nlevel = "error"\n')

        settings = load_settings(path, environ={})

        assert settings.db_path == DEFAULT_DB_PATH
        assert settings.log_level == "ERROR"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[store\n")

        with pytest.raises(DomcpError, match="Invalid config file"):
            load_settings(path, environ={})
