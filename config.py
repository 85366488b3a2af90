import logging
import os

import yaml

APP_VERSION = "1.0.0"

LOGGER = logging.getLogger(__name__)


class YamlConfig:
    """Load and save settings to a YAML file."""

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                LOGGER.warning("ignoring unreadable settings file %s: %s", self.path, e)
                return {}
        if not isinstance(data, dict):
            LOGGER.warning("ignoring settings file %s without a mapping", self.path)
            return {}
        return data

    def save(self, data: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f, allow_unicode=True)
