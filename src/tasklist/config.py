"""Configuration management for the tasklist application."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .task import TaskState

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TASKLIST_HOME"
COLOR_SCHEMES = ("light", "dark")


def _default_data_dir() -> str:
    return os.environ.get(HOME_ENV_VAR) or "~/.tasklist"


@dataclass
class ConfigModel:
    """Global configuration model for tasklist."""

    # Storage
    data_dir: str = ""
    storage_file: str = "storage.json"
    tasks_key: str = "tasks"
    color_scheme_key: str = "color-scheme"

    # Defaults for new tasks
    default_state: TaskState = TaskState.NOT_DONE

    # Display preferences
    color_scheme: str = "light"  # light, dark
    confirm_deletion: bool = True

    def __post_init__(self):
        if not self.data_dir:
            self.data_dir = _default_data_dir()
        self.data_dir = os.path.expanduser(self.data_dir)

        if not isinstance(self.default_state, TaskState):
            try:
                self.default_state = TaskState.parse(self.default_state)
            except ValueError:
                logger.warning(f"Unknown default_state {self.default_state!r}, using 'Not done'")
                self.default_state = TaskState.NOT_DONE

        if self.color_scheme not in COLOR_SCHEMES:
            logger.warning(f"Unknown color_scheme {self.color_scheme!r}, using 'light'")
            self.color_scheme = "light"

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "data_dir": self.data_dir,
            "storage_file": self.storage_file,
            "tasks_key": self.tasks_key,
            "color_scheme_key": self.color_scheme_key,
            "default_state": self.default_state.label,
            "color_scheme": self.color_scheme,
            "confirm_deletion": self.confirm_deletion,
        }
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML.

        Unknown keys are ignored so older or hand-edited files still load.
        """
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a YAML mapping")

        known = {f for f in cls.__dataclass_fields__}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        return cls(**{k: v for k, v in data.items() if k in known})

    def get_storage_path(self) -> Path:
        """Get the key-value storage file path."""
        return Path(self.data_dir) / self.storage_file

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"


class Config:
    """Configuration manager for tasklist."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file or create default."""
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    yaml_content = f.read()
                config = ConfigModel.from_yaml(yaml_content)
                logger.debug(f"Loaded configuration from {config_path}")
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}; using defaults")
        else:
            cls.save(config, config_path)
            logger.info(f"Created default configuration at {config_path}")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(config.to_yaml())
            logger.debug(f"Configuration saved to {config_path}")
        except OSError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)

    @classmethod
    def reset(cls) -> None:
        """Forget the cached configuration (useful for testing)."""
        cls._instance = None


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
