"""
Configuration
Perimeter

YAML configuration files with environment variable substitution, and the
settings read by the guard and the CLI.

Settings come from the ``perimeter`` section of ``<config_dir>/perimeter.yaml``
and are overridden by PERIMETER_* environment variables.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PATTERN = re.compile(r'\$\{([^}]+)\}')

DEFAULT_CONFIG_DIR = "config"


def substitute_env(content: str) -> str:
    """Substitute ``${VAR}`` and ``${VAR:default}`` with environment variables."""
    def replacer(match):
        var_name = match.group(1)
        default = None

        if ":" in var_name:
            var_name, default = var_name.split(":", 1)

        return os.getenv(var_name, default or "")

    return ENV_PATTERN.sub(replacer, content)


class Config:
    """Configuration loader with environment variable substitution."""

    def __init__(self, config_path: str | Path = DEFAULT_CONFIG_DIR):
        self.config_path = Path(config_path)
        self._cache: dict[str, dict] = {}

    def load(self, name: str) -> dict:
        """Load configuration file by name; missing files load as {}."""
        if name in self._cache:
            return self._cache[name]

        path = self.config_path / f"{name}.yaml"
        if not path.exists():
            path = self.config_path / f"{name}.yml"

        if not path.exists():
            return {}

        with open(path, encoding="utf-8") as f:
            content = f.read()

        config = yaml.safe_load(substitute_env(content)) or {}
        self._cache[name] = config

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """Get nested config value using dot notation, e.g. ``perimeter.log_level``."""
        parts = key.split(".")

        config = self.load(parts[0])
        for part in parts[1:]:
            if isinstance(config, dict):
                config = config.get(part)
            else:
                return default
        return config if config is not None else default


class Settings(BaseModel):
    """Runtime settings."""

    guard_strict: bool = Field(default=True, description="Guards raise instead of warning")
    log_level: str = Field(default="INFO")
    log_dir: str | None = Field(default=None, description="Directory for JSON log files")
    contracts_path: str | None = Field(default=None, description="Default contract file for the CLI")


ENV_OVERRIDES = {
    "PERIMETER_GUARD_STRICT": "guard_strict",
    "PERIMETER_LOG_LEVEL": "log_level",
    "PERIMETER_LOG_DIR": "log_dir",
    "PERIMETER_CONTRACTS": "contracts_path",
}


def load_settings(config_dir: str | Path | None = None) -> Settings:
    """Read settings from the config directory, then apply environment overrides."""
    config_dir = config_dir or os.getenv("PERIMETER_CONFIG_DIR", DEFAULT_CONFIG_DIR)
    values = dict(Config(config_dir).get("perimeter.perimeter", {}) or {})

    for env_var, key in ENV_OVERRIDES.items():
        raw = os.getenv(env_var)
        if raw:
            values[key] = raw

    settings = Settings(**values)
    logger.debug(f"Loaded settings from {config_dir}: {settings.model_dump()}")
    return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
