from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from linechat.constants import CONFIG_FILE
from linechat.models import ClientConfig

logger = logging.getLogger(__name__)


class ConfigRepository:
    def __init__(self, path: str = CONFIG_FILE):
        self.path = path

    def load_config(self) -> ClientConfig:
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return ClientConfig.model_validate(data)
                logger.warning("Ignoring config in %s: not a JSON object", self.path)
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Failed to load config from %s: %s", self.path, exc)
            except ValidationError as exc:
                logger.warning("Invalid config in %s: %s", self.path, exc)
        return ClientConfig()

    def save_config(self, config: ClientConfig) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f)
        except OSError as exc:
            logger.warning("Failed saving config to %s: %s", self.path, exc)
