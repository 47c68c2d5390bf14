import copy
import json
from typing import Any, Dict

from mac_volume.utils.logging_config import get_logger
from mac_volume.utils.resource_finder import resource_finder

logger = get_logger(__name__)


class ConfigManager:
    """Configuration manager - singleton."""

    _instance = None

    # Default configuration.
    DEFAULT_CONFIG = {
        "VOLUME": {
            # Percent used by `set` when the argument is not a number.
            "SET_FALLBACK": 50.0,
            # Percent used by `inc`/`dec` when no valid amount is given.
            "STEP": 2.0,
        },
        "LOGGING": {
            "CONSOLE_LEVEL": "WARNING",
            "FILE_LEVEL": "INFO",
            "FILE_ENABLED": True,
        },
    }

    def __new__(cls):
        """
        Ensure singleton mode.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """
        Initialize the configuration manager.
        """
        if self._initialized:
            return
        self._initialized = True

        # Initialize config file paths.
        self._init_config_paths()

        # Load configuration.
        self._config = self._load_config()

    def _init_config_paths(self):
        """
        Initialize config file paths.
        """
        self.config_dir = resource_finder.find_config_dir()
        if not self.config_dir:
            self.config_dir = resource_finder.get_user_data_dir() / "config"

        self.config_file = self.config_dir / "config.json"
        logger.debug(f"Config file: {self.config_file.absolute()}")

    def _load_config(self) -> Dict[str, Any]:
        """
        Load config file, creating it if missing.
        """
        try:
            if self.config_file.exists():
                logger.debug(f"Found config file: {self.config_file}")
                config = json.loads(self.config_file.read_text(encoding="utf-8"))
                return self._merge_configs(self.DEFAULT_CONFIG, config)

            # Create default config file.
            logger.info("Config file missing; creating default configuration.")
            self._save_config(self.DEFAULT_CONFIG)
            return copy.deepcopy(self.DEFAULT_CONFIG)

        except (OSError, ValueError) as e:
            logger.error(f"Config load error: {e}")
            return copy.deepcopy(self.DEFAULT_CONFIG)

    def _save_config(self, config: dict) -> bool:
        """
        Save configuration to file.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            logger.debug(f"Config saved to: {self.config_file}")
            return True

        except OSError as e:
            logger.error(f"Config save error: {e}")
            return False

    @staticmethod
    def _merge_configs(default: dict, custom: dict) -> dict:
        """
        Recursively merge configuration dictionaries.
        """
        result = copy.deepcopy(default)
        for key, value in custom.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigManager._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get_config(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value by path.
        path: Dot-separated config path, e.g. "VOLUME.STEP"
        """
        try:
            value = self._config
            for key in path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def update_config(self, path: str, value: Any) -> bool:
        """
        Update a specific configuration value.
        path: Dot-separated config path, e.g. "LOGGING.CONSOLE_LEVEL"
        """
        try:
            current = self._config
            *parts, last = path.split(".")
            for part in parts:
                current = current.setdefault(part, {})
            current[last] = value
            return self._save_config(self._config)
        except (AttributeError, TypeError) as e:
            logger.error(f"Config update error {path}: {e}")
            return False

    def reload_config(self) -> bool:
        """
        Reload the configuration file.
        """
        self._config = self._load_config()
        logger.info("Configuration file reloaded.")
        return True

    @classmethod
    def get_instance(cls):
        """
        Get the configuration manager instance.
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance
