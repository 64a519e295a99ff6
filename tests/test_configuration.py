"""Tests for layered configuration loading."""
import os

import pytest
import yaml

from freeki.shared.core.configuration import ClientConfig, ConfigManager, ValidationLevel


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


def test_missing_files_give_model_defaults(config_dir, clean_env):
    config = ConfigManager(config_dir).get_config()
    assert config == ClientConfig()
    assert config.api.base_url == "http://localhost:5000"
    assert config.theme.debounce_ms == 16.0


def test_precedence_env_over_project_over_user_over_defaults(config_dir, clean_env):
    _write_yaml(config_dir / "defaults.yaml", {"api": {"base_url": "http://defaults", "timeout": 5.0}})
    _write_yaml(config_dir / "user.yaml", {"api": {"base_url": "http://user"}, "theme": {"debounce_ms": 32.0}})
    _write_yaml(config_dir / "project.yaml", {"api": {"base_url": "http://project"}})
    clean_env.setenv("FREEKI_THEME_DEBOUNCE_MS", "50")

    config = ConfigManager(config_dir).get_config()

    assert config.api.base_url == "http://project"
    assert config.api.timeout == 5.0
    assert config.theme.debounce_ms == 50.0


def test_env_overrides_are_typed(config_dir, clean_env):
    clean_env.setenv("FREEKI_USE_FAKE_API", "yes")
    clean_env.setenv("FREEKI_SETTINGS_IN_MEMORY", "0")
    clean_env.setenv("FREEKI_PLATFORM_COLOR_SCHEME", "dark")
    clean_env.setenv("FREEKI_API_TIMEOUT", "not-a-number")

    config = ConfigManager(config_dir).get_config()

    assert config.api.use_fake_api is True
    assert config.persistence.in_memory is False
    assert config.theme.platform_color_scheme == "dark"
    assert config.api.timeout == 10.0


def test_strict_validation_raises(config_dir, clean_env):
    _write_yaml(config_dir / "project.yaml", {"api": {"timeout": -1}})

    with pytest.raises(ValueError):
        ConfigManager(config_dir).get_config(ValidationLevel.STRICT)


def test_lenient_validation_falls_back_to_defaults(config_dir, clean_env):
    _write_yaml(config_dir / "project.yaml", {"theme": {"unknown_option": True}})

    config = ConfigManager(config_dir).get_config(ValidationLevel.LENIENT)

    assert config == ClientConfig()


def test_malformed_yaml_is_ignored(config_dir, clean_env):
    (config_dir / "user.yaml").write_text("api: [unclosed", encoding="utf-8")
    _write_yaml(config_dir / "project.yaml", ["not", "a", "mapping"])

    assert ConfigManager(config_dir).get_config() == ClientConfig()


def test_save_project_config_round_trip(config_dir, clean_env):
    manager = ConfigManager(config_dir)
    assert manager.get_config().persistence.in_memory is False

    assert manager.save_project_config({"persistence": {"in_memory": True}}) is True
    assert manager.save_project_config({"api": {"use_fake_api": True}}) is True

    config = manager.get_config()
    assert config.persistence.in_memory is True
    assert config.api.use_fake_api is True
    assert yaml.safe_load((config_dir / "project.yaml").read_text(encoding="utf-8")) == {
        "persistence": {"in_memory": True},
        "api": {"use_fake_api": True},
    }


def test_reload_config_rereads_files(config_dir, clean_env):
    manager = ConfigManager(config_dir)
    assert manager.get_config().device.user_agent == "freeki-client"

    _write_yaml(config_dir / "user.yaml", {"device": {"user_agent": "kiosk"}})
    assert manager.get_config().device.user_agent == "freeki-client"

    manager.reload_config()
    assert manager.get_config().device.user_agent == "kiosk"


def test_env_file_is_loaded(config_dir, clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FREEKI_API_BASE_URL=http://from-dotenv\n", encoding="utf-8")

    try:
        config = ConfigManager(config_dir, env_file=env_file).get_config()
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("FREEKI_API_BASE_URL", None)

    assert config.api.base_url == "http://from-dotenv"
