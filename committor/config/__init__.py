"""Configuration Management Package"""

import json
import logging
import sys
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

VALID_PROVIDERS = {"auto", "claude", "openai", "ollama"}


@dataclass
class Config:
    """User configuration with sensible defaults."""
    provider: str = "auto"
    model: Optional[str] = None
    count: int = 3
    timeout: int = 60
    ollama_url: str = "http://localhost:11434"
    auto_commit: bool = False
    show_diff: bool = False
    max_diff_bytes: int = 12000
    retries: int = 1
    max_subject_length: int = 72
    ticket_prefix: str = "Refs"

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{self.provider}', using '{defaults.provider}'")
            self.provider = defaults.provider

        for name in ("count", "timeout", "max_diff_bytes", "max_subject_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                default = getattr(defaults, name)
                warnings.append(f"Invalid {name} '{value}', using {default}")
                setattr(self, name, default)

        if isinstance(self.retries, bool) or not isinstance(self.retries, int) or self.retries < 0:
            warnings.append(f"Invalid retries '{self.retries}', using {defaults.retries}")
            self.retries = defaults.retries

        for name in ("auto_commit", "show_diff"):
            if not isinstance(getattr(self, name), bool):
                warnings.append(f"Invalid {name} '{getattr(self, name)}', using {getattr(defaults, name)}")
                setattr(self, name, getattr(defaults, name))

        if not isinstance(self.ollama_url, str) or not self.ollama_url.startswith(("http://", "https://")):
            warnings.append(f"Invalid ollama_url '{self.ollama_url}', using {defaults.ollama_url}")
            self.ollama_url = defaults.ollama_url

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".committorrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in (Path.cwd() / self.CONFIG_FILENAME, Path.home() / self.CONFIG_FILENAME):
            if path.exists():
                self._config = self._load_from_file(path)
                self._config_path = path
                logger.debug("Loaded config from %s", path)
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()
        if not isinstance(data, dict):
            print(f"Warning: Could not load {path}: expected a JSON object", file=sys.stderr)
            return Config()
        return Config.from_dict(data)

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w') as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "save_config",
    "get_config_path",
    "VALID_PROVIDERS",
]
