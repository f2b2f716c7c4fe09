"""YAML-backed configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from streampatch.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".streampatch"


@dataclass
class StreamConfig:
    render_throttle_ms: int = 300
    mode_header: str = "X-Response-Type"
    default_mode: str = "full"
    chunk_size: int = 64


@dataclass
class TransportConfig:
    endpoint: str = "http://localhost:3000/api/ask-ai"
    timeout_seconds: int = 60


@dataclass
class LoggingConfig:
    log_level: str = "INFO"
    patching_log_level: Optional[str] = None
    log_file: Path = field(default_factory=lambda: DEFAULT_CONFIG_DIR / "streampatch.log")


@dataclass
class DeveloperConfig:
    debug_mode: bool = False


class Config:
    """Application configuration loaded from a flat YAML mapping."""

    CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
    ENV_VAR = "STREAMPATCH_CONFIG"

    def __init__(self, config_path: Optional[Path] = None):
        self.stream = StreamConfig()
        self.transport = TransportConfig()
        self.logging = LoggingConfig()
        self.developer = DeveloperConfig()

        self.config_path = self._resolve_path(config_path)
        self._apply(self._load_raw(self.config_path))

    def _resolve_path(self, config_path: Optional[Path]) -> Path:
        if config_path is not None:
            return Path(config_path).expanduser()
        env_path = os.environ.get(self.ENV_VAR, "").strip()
        if env_path:
            return Path(env_path).expanduser()
        return self.CONFIG_FILE

    @staticmethod
    def _load_raw(path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"config file {path} must contain a mapping")
        return loaded

    def _sections(self):
        return (self.stream, self.transport, self.logging, self.developer)

    def _apply(self, raw: Dict[str, Any]) -> None:
        for key, value in raw.items():
            section = next(
                (item for item in self._sections() if key in {f.name for f in fields(item)}),
                None,
            )
            if section is None:
                logger.warning("Ignoring unknown config key=%s", key)
                continue
            setattr(section, key, self._coerce(key, getattr(section, key), value))

        if self.stream.render_throttle_ms < 0:
            raise ConfigError("render_throttle_ms must be >= 0")
        if self.stream.chunk_size < 1:
            raise ConfigError("chunk_size must be >= 1")

    @staticmethod
    def _coerce(key: str, default: Any, value: Any) -> Any:
        if isinstance(default, Path):
            if not isinstance(value, str):
                raise ConfigError(f"{key} must be a path string")
            return Path(value).expanduser()
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be a bool")
            return value
        if isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be an int")
            return value
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string")
        return value
