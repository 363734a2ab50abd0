"""Light/dark theme preference, persisted between sessions."""
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

MODES = ("light", "dark")
DEFAULT_MODE = "dark"


class ThemePreference:
    """Stores the chosen mode in a small YAML file."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.mode = DEFAULT_MODE

    def load(self) -> str:
        """Read the saved mode; anything missing or invalid keeps the default."""
        if not self.path.exists():
            return self.mode
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read theme preference {self.path}: {e}")
            return self.mode
        mode = data.get("mode") if isinstance(data, dict) else None
        if mode in MODES:
            self.mode = mode
        return self.mode

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump({"mode": self.mode}, f)

    def toggle(self) -> str:
        self.mode = "light" if self.mode == "dark" else "dark"
        self.save()
        return self.mode
