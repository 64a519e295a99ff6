"""
Configuration Management System for the FreeKi client

This module provides a centralized configuration system that supports a 4-tier
precedence hierarchy: environment → project → user → system defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class ApiConfig(BaseModel):
    """Wiki server connection"""
    model_config = ConfigDict(extra='forbid')

    base_url: str = Field(default="http://localhost:5000", description="Wiki server base URL")
    timeout: float = Field(default=10.0, ge=0.5, le=300.0, description="Request timeout (seconds)")
    use_fake_api: bool = Field(default=False, description="Serve admin/user data from memory instead of HTTP")


class ThemeConfig(BaseModel):
    """Theme application"""
    model_config = ConfigDict(extra='forbid')

    debounce_ms: float = Field(default=16.0, ge=0.0, le=1000.0, description="Coalescing window for theme applies")
    platform_color_scheme: Literal["light", "dark"] = Field(
        default="light", description="Color scheme reported by the platform, used for 'auto'"
    )
    stylesheet_path: Optional[str] = Field(default=None, description="Write resolved style variables to this CSS file")


class PersistenceConfig(BaseModel):
    """Local settings storage"""
    model_config = ConfigDict(extra='forbid')

    db_path: str = Field(default="data/db/freeki_settings.duckdb", description="Settings database file path")
    in_memory: bool = Field(default=False, description="Keep settings in memory only")


class DeviceConfig(BaseModel):
    """Device description used to derive the settings slot"""
    model_config = ConfigDict(extra='forbid')

    screen_width: int = Field(default=1920, ge=1, le=20000)
    screen_height: int = Field(default=1080, ge=1, le=20000)
    viewport_width: int = Field(default=1920, ge=1, le=20000)
    user_agent: str = Field(default="freeki-client", description="User agent string hashed into the slot key")


class ClientConfig(BaseModel):
    """Complete client configuration"""
    model_config = ConfigDict(extra='forbid')

    api: ApiConfig = Field(default_factory=ApiConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)

    # Metadata
    schema_version: int = Field(default=1, description="Configuration schema version")


# Environment variable → (section, key, type)
ENV_OVERRIDES: Dict[str, tuple] = {
    'FREEKI_API_BASE_URL': ('api', 'base_url', str),
    'FREEKI_API_TIMEOUT': ('api', 'timeout', float),
    'FREEKI_USE_FAKE_API': ('api', 'use_fake_api', bool),
    'FREEKI_THEME_DEBOUNCE_MS': ('theme', 'debounce_ms', float),
    'FREEKI_PLATFORM_COLOR_SCHEME': ('theme', 'platform_color_scheme', str),
    'FREEKI_STYLESHEET_PATH': ('theme', 'stylesheet_path', str),
    'FREEKI_SETTINGS_DB': ('persistence', 'db_path', str),
    'FREEKI_SETTINGS_IN_MEMORY': ('persistence', 'in_memory', bool),
    'FREEKI_USER_AGENT': ('device', 'user_agent', str),
}


class ConfigManager:
    """Centralized configuration manager with 4-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None, env_file: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.cwd() / "config"
        self._system_config: Optional[ClientConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None
        self._project_config: Optional[Dict[str, Any]] = None

        if env_file is not None:
            load_dotenv(dotenv_path=env_file)

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {file_path}: top level is not a mapping")
            return {}
        return data

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save {file_path}: {e}")
            return False

    def _load_system_defaults(self) -> ClientConfig:
        """Load system default configuration"""
        if self._system_config is None:
            defaults_dict = self._load_yaml_file(self.config_dir / "defaults.yaml")

            try:
                self._system_config = ClientConfig(**defaults_dict)
            except ValidationError as e:
                logger.warning(f"System defaults validation failed: {e}")
                # Use Pydantic defaults
                self._system_config = ClientConfig()

        return self._system_config

    def _load_user_config(self) -> Dict[str, Any]:
        """Load user-level configuration"""
        if self._user_config is None:
            self._user_config = self._load_yaml_file(self.config_dir / "user.yaml")
        return self._user_config

    def _load_project_config(self) -> Dict[str, Any]:
        """Load project-specific configuration"""
        if self._project_config is None:
            self._project_config = self._load_yaml_file(self.config_dir / "project.yaml")
        return self._project_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → project → user → system"""
        merged = self._load_system_defaults().model_dump()
        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._load_project_config())
        self._deep_merge(merged, self._get_env_overrides())
        return merged

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Deep merge configuration dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, (section, config_key, kind) in ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if kind is bool:
                converted: Any = value.lower() in ('true', '1', 'yes', 'on')
            elif kind is float:
                try:
                    converted = float(value)
                except ValueError:
                    logger.warning(f"Ignoring {env_key}={value!r}: not a number")
                    continue
            else:
                converted = value

            overrides.setdefault(section, {})[config_key] = converted

        return overrides

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> ClientConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return ClientConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}") from e
            logger.warning(f"Configuration validation failed, using defaults: {e}")
            return ClientConfig()

    def save_project_config(self, config_updates: Dict[str, Any]) -> bool:
        """Save project-specific configuration updates"""
        project_path = self.config_dir / "project.yaml"

        existing_config = self._load_yaml_file(project_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(project_path, existing_config)
        if success:
            # Clear cached project config to force reload
            self._project_config = None

        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None
        self._project_config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get global configuration manager instance"""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> ClientConfig:
    """Get current client configuration"""
    return get_config_manager().get_config(validation_level)
