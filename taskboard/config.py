# taskboard: configuration
# Override via taskboard.yaml, TASKBOARD_* environment variables or CLI args.

import os
import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "taskboard" / "taskboard.yaml"


@dataclass
class Config:
    """Runtime configuration for the board client."""

    # Task API
    api_url: str = "http://localhost:4000"
    request_timeout: float = 10.0

    # Cache behaviour
    stale_time_secs: float = 300.0   # 5 min
    gc_time_secs: float = 600.0      # 10 min
    retry: int = 1
    retry_delay_secs: float = 1.0

    # Column windows
    page_size: int = 5
    scroll_threshold: float = 100.0

    # Theme preference file
    theme_path: str = "~/.local/share/taskboard/theme.yaml"

    def resolve_paths(self):
        """Expand ~ and apply environment overrides."""
        env_url = os.environ.get("TASKBOARD_API_URL")
        if env_url:
            self.api_url = env_url
        self.theme_path = str(Path(self.theme_path).expanduser())

    def validate(self):
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(f"api_url must be an http(s) URL, got {self.api_url!r}")
        if self.page_size < 1:
            raise ConfigError(f"page_size must be positive, got {self.page_size}")
        if self.retry < 0:
            raise ConfigError(f"retry must not be negative, got {self.retry}")

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        path = path or os.environ.get("TASKBOARD_CONFIG")
        cfg_path = Path(path).expanduser() if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
                logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
                cfg = cls()
        else:
            cfg = cls()
        cfg.resolve_paths()
        cfg.validate()
        return cfg
