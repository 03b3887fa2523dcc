"""Tests for configuration loading."""

import pytest

from fusionboard.config import ENV_DB, Config, ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(ENV_DB, raising=False)
    monkeypatch.delenv("FUSIONBOARD_CONFIG", raising=False)


def test_defaults_when_file_missing(tmp_path):
    """Test a missing config file gives defaults"""
    cfg = Config.load(str(tmp_path / "missing.yaml"))
    assert cfg.port == 3000
    assert cfg.host == "127.0.0.1"
    assert cfg.seed is True
    assert cfg.db_path.endswith("board.db")
    assert "~" not in cfg.db_path


def test_load_yaml_ignores_unknown_keys(tmp_path):
    """Test YAML values are applied and unknown keys dropped"""
    path = tmp_path / "fusionboard.yaml"
    path.write_text("port: 8080\nseed: false\nlog_level: debug\ntheme: dark\n")
    cfg = Config.load(str(path))
    assert cfg.port == 8080
    assert cfg.seed is False
    assert cfg.log_level == "DEBUG"
    assert not hasattr(cfg, "theme")


def test_env_overrides_db_path(tmp_path, monkeypatch):
    """Test FUSIONBOARD_DB wins over the file"""
    path = tmp_path / "fusionboard.yaml"
    path.write_text("db_path: /somewhere/else.db\n")
    monkeypatch.setenv(ENV_DB, str(tmp_path / "env.db"))
    cfg = Config.load(str(path))
    assert cfg.db_path == str(tmp_path / "env.db")


def test_config_path_from_env(tmp_path, monkeypatch):
    path = tmp_path / "fusionboard.yaml"
    path.write_text("port: 9000\n")
    monkeypatch.setenv("FUSIONBOARD_CONFIG", str(path))
    assert Config.load().port == 9000


def test_malformed_yaml_raises(tmp_path):
    """Test broken YAML is reported"""
    path = tmp_path / "fusionboard.yaml"
    path.write_text("port: [8080\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))


def test_non_mapping_raises(tmp_path):
    path = tmp_path / "fusionboard.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))


def test_bad_value_raises(tmp_path):
    path = tmp_path / "fusionboard.yaml"
    path.write_text("port: eighty\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))
