"""Configuration management for the task board using YAML files."""

from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".taskboard"

DEFAULTS: dict[str, Any] = {
    "snapshot.path": f"{CONFIG_DIR_NAME}/board.yaml",
    "ordering.strict": True,
}

BOOLEAN_KEYS = {"ordering.strict"}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(key: str, value: Any) -> bool:
    """Read a yes/no style value, raising ValueError for anything else."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Config value {key}={value!r} is not a boolean")


def _global_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


class Config:
    """Configuration manager using YAML file storage.

    Local config lives in .taskboard/config.yaml in the current directory and global
    config in ~/.taskboard/config.yaml. Reads look at local config first, then
    global config, then the built-in defaults.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            use_global: If True, use global config only. If False, use local config with global fallback.
            config_dir: Custom directory to store config file (overrides use_global)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
            self.is_global = use_global
        elif use_global:
            self.config_dir = _global_config_dir()
            self.is_global = True
        else:
            self.config_dir = Path.cwd() / CONFIG_DIR_NAME
            self.is_global = False

        self.config_file = self.config_dir / "config.yaml"
        self._config: dict[str, Any] = self._load(self.config_file)

        self._global_config: dict[str, Any] = {}
        if not self.is_global:
            global_config_file = _global_config_dir() / "config.yaml"
            if global_config_file.exists() and global_config_file != self.config_file:
                try:
                    self._global_config = self._load(global_config_file)
                except ValueError as e:
                    logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    @staticmethod
    def _load(config_file: Path) -> dict[str, Any]:
        if not config_file.exists():
            logger.debug("Config file does not exist, initializing empty config", config_file=str(config_file))
            return {}

        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", config_file=str(config_file), error=str(e))
            raise ValueError(f"Failed to load config from {config_file}: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        logger.debug("Config loaded successfully", keys=list(config.keys()))
        return config

    def _save(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
            logger.debug("Config saved successfully")
        except OSError as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: Configuration key
            default: Value returned when neither the config files nor the built-in defaults have the key

        Returns:
            Configuration value or default
        """
        if key in self._config:
            logger.debug("Getting config value from local", key=key)
            return self._config[key]

        if not self.is_global and key in self._global_config:
            logger.debug("Getting config value from global", key=key)
            return self._global_config[key]

        if default is None and key in DEFAULTS:
            return DEFAULTS[key]

        logger.debug("Config value not found", key=key)
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a configuration value as a boolean, accepting yes/no style strings."""
        value = self.get(key)
        if value is None:
            return default
        return parse_bool(key, value)

    def set(self, key: str, value: Any) -> Any:
        """Set a configuration value.

        Boolean settings are parsed and stored as booleans.

        Args:
            key: Configuration key
            value: Configuration value

        Returns:
            The value as stored
        """
        if key in BOOLEAN_KEYS:
            value = parse_bool(key, value)
        logger.debug("Setting config value", key=key)
        self._config[key] = value
        self._save()
        return value

    def unset(self, key: str) -> bool:
        """Remove a configuration value. Returns False if the key was not set here."""
        logger.debug("Unsetting config value", key=key)
        if key not in self._config:
            return False
        del self._config[key]
        self._save()
        return True

    def source(self, key: str) -> str | None:
        """Name the layer a key is read from: local, global, default, or None."""
        if key in self._config:
            return "global" if self.is_global else "local"
        if not self.is_global and key in self._global_config:
            return "global"
        if key in DEFAULTS:
            return "default"
        return None

    def list(self) -> dict[str, Any]:
        """List all configuration settings.

        For local config, merges global config with local config (local takes precedence).
        """
        if self.is_global:
            return self._config.copy()
        merged = self._global_config.copy()
        merged.update(self._config)
        logger.debug("Listing merged config values", count=len(merged))
        return merged

    @property
    def snapshot_path(self) -> Path:
        """Board snapshot location. Relative paths resolve against the current directory."""
        return Path(str(self.get("snapshot.path"))).expanduser()

    @property
    def strict_ordering(self) -> bool:
        return self.get_bool("ordering.strict", default=True)


def get_config(use_global: bool = False) -> Config:
    """Get a configuration instance.

    Args:
        use_global: If True, return global config. If False, return local config with global fallback.

    Returns:
        Config instance
    """
    return Config(use_global=use_global)
