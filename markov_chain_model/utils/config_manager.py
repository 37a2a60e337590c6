# config_manager.py - JSON config manager

import json
import logging
import os

from markov_chain_model.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULTS = {
    "order": 3,
    "top_tokens": 5,
    "model_path": os.path.join("data", "markov_model.json"),
    "key_format": "json",  # "json" or "legacy"
    "token_type": "str",
    "log_path": os.path.join("logs", "markov_model.log"),
    "autosave": False,
}


class Config:
    def __init__(self, path="markov_config.json"):
        self.path = path
        self.data = dict(DEFAULTS)
        # session-only values (command line flags), never written by save()
        self.overrides = {}
        self._load()

    def __getitem__(self, key):
        if key in self.overrides:
            return self.overrides[key]
        return self.data[key]

    def override(self, key, val):
        if key not in self.data:
            raise ConfigError(f"no such option: {key}")
        self.overrides[key] = val

    def _load(self):
        if not os.path.exists(self.path):
            self.save()
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("config %s unreadable, using defaults: %s", self.path, e)
            return
        if not isinstance(loaded, dict):
            logger.warning("config %s is not a JSON object, using defaults", self.path)
            return
        for k, v in loaded.items():
            if k in self.data:
                self.data[k] = v
            else:
                logger.warning("ignoring unknown config option %r", k)

    def save(self):
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def show(self):
        return "\n".join(f"{k:15} = {self[k]}" for k in self.data)

    def set(self, key, val):
        if key not in self.data:
            raise ConfigError(f"no such option: {key}")
        kind = type(DEFAULTS[key])
        try:
            if kind is bool and isinstance(val, str):
                val = val.strip().lower() in ("1", "true", "yes", "on")
            else:
                val = kind(val)
        except (TypeError, ValueError):
            raise ConfigError(f"bad value for {key}: {val!r}") from None
        self.data[key] = val
        self.overrides.pop(key, None)
        self.save()
