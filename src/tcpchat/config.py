import json
import logging
import os

logger = logging.getLogger(__name__)


class ChatConfig:
    """Server and client settings, persisted to a JSON file.

    A missing file is created with the defaults. Unknown or missing keys
    fall back to the defaults on ``get``.
    """

    def __init__(self, config_file="chat_config.json"):
        self.config_file = config_file
        self.default_config = {
            "host": "127.0.0.1",
            "port": 5050,
            "max_connections": 5,
            "log_file": "log.txt"
        }
        self.load_config()

    def load_config(self):
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, 'r') as f:
                    self.config = json.load(f)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON in {self.config_file}. Using default configuration.")
                self.config = self.default_config.copy()
        else:
            self.config = self.default_config.copy()  # Use copy to avoid modifying default
            self.save_config()

    def save_config(self):
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=4)

    def get(self, key):
        return self.config.get(key, self.default_config.get(key))

    def update(self, key, value):
        if key == "max_connections":
            value = self.validate_limit(value)
        self.config[key] = value
        self.save_config()

    def max_connections(self):
        return self.validate_limit(self.get("max_connections"))

    @staticmethod
    def validate_limit(value):
        """Return the admission limit as an int.

        Raises:
            ValueError: If the value is not an integer of at least 1.
        """
        limit = int(value)
        if limit < 1:
            raise ValueError(f"max_connections must be at least 1, got {value}")
        return limit
