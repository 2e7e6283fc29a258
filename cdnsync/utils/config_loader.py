"""
Configuration loader for config.json
"""
import os
import json
from pathlib import Path
from typing import Dict, Any
from colorama import Fore, Style

from ..exceptions import ConfigError
from .logger import get_logger

log = get_logger(__name__)

CONFIG_ENV_VAR = "CDNSYNC_CONFIG"

# Default configuration with placeholder values.
# Used to bootstrap config.json when it does not exist yet.
DEFAULT_CONFIG: Dict[str, Any] = {
    "aws_profile": "",
    "aws_region": "",
    "workers": 8,
    "queue_size": 100,
    "cache_control": "max-age=900",
    "acl": "public-read",
    "compress_min_size": 500,
    "upload_retries": 2,
}

# Keys that must hold a non-negative number, with the minimum accepted value
_NUMERIC_KEYS = {
    "workers": 1,
    "queue_size": 1,
    "compress_min_size": 0,
    "upload_retries": 0,
}


class ConfigLoader:
    """Handles loading and saving configuration files."""

    @staticmethod
    def get_config_path(filename="config.json"):
        """
        Get full path to configuration file.

        ``$CDNSYNC_CONFIG`` wins when set, otherwise ``~/.cdnsync/<filename>``.

        Args:
            filename: Configuration filename

        Returns:
            Full path to config file
        """
        override = os.environ.get(CONFIG_ENV_VAR, "").strip()
        if override:
            return override

        return str(Path.home() / ".cdnsync" / filename)

    @staticmethod
    def ensure_config_exists():
        """
        Ensure config.json exists, creating it with defaults if missing.

        Returns:
            Path to the config.json file
        """
        config_path = Path(ConfigLoader.get_config_path())

        if not config_path.exists():
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w') as f:
                json.dump(DEFAULT_CONFIG, f, indent=2)
            log.debug("Created default config.json at %s", config_path)

        return config_path

    @staticmethod
    def load_config_json():
        """
        Load main config.json file.
        Creates the file with default values if it does not exist.
        Missing keys are filled from :data:`DEFAULT_CONFIG`.

        Returns:
            Configuration dictionary with defaults
        """
        config = dict(DEFAULT_CONFIG)

        try:
            config_path = ConfigLoader.ensure_config_exists()
            with open(config_path, 'r') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.error("Error loading config.json: %s", e)
            return config

        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            log.error("Ignoring config.json: top level must be a JSON object")

        return config


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check numeric settings and coerce them to their default's type.

    Args:
        config: Configuration dictionary (modified in place)

    Returns:
        The same dictionary

    Raises:
        ConfigError: a numeric setting is missing its minimum or not a number
    """
    for key, minimum in _NUMERIC_KEYS.items():
        value = config.get(key, DEFAULT_CONFIG[key])
        kind = type(DEFAULT_CONFIG[key])
        try:
            value = kind(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{key}' must be a number, got {value!r}")
        if value < minimum:
            raise ConfigError(f"'{key}' must be >= {minimum}, got {value}")
        config[key] = value
    return config


def handle_config_update(config_json_string):
    """Handle config update command.

    Args:
        config_json_string: JSON string with config updates

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config_updates = json.loads(config_json_string)
    except json.JSONDecodeError as e:
        print(f"{Fore.RED}[ERROR] Invalid JSON in --config argument: {e}{Style.RESET_ALL}")
        return 1

    if not isinstance(config_updates, dict):
        print(f"{Fore.RED}[ERROR] --config must be a JSON object (dictionary){Style.RESET_ALL}")
        return 1

    invalid_keys = [key for key in config_updates if key not in DEFAULT_CONFIG]
    if invalid_keys:
        print(f"{Fore.RED}[ERROR] Invalid configuration key(s): {', '.join(invalid_keys)}{Style.RESET_ALL}")
        print(f"\n{Fore.YELLOW}Valid keys in config.json:{Style.RESET_ALL}")
        for key in sorted(DEFAULT_CONFIG):
            print(f"  • {key}")
        return 1

    try:
        config_path = ConfigLoader.ensure_config_exists()
        current_config = ConfigLoader.load_config_json()
        current_config.update(config_updates)
        validate_config(current_config)

        with open(config_path, 'w') as f:
            json.dump(current_config, f, indent=2)
    except ConfigError as e:
        print(f"{Fore.RED}[ERROR] {e}{Style.RESET_ALL}")
        return 1
    except OSError as e:
        print(f"{Fore.RED}[ERROR] Failed to update configuration: {e}{Style.RESET_ALL}")
        return 1

    print(f"\n{Fore.GREEN}[SUCCESS] Configuration updated successfully{Style.RESET_ALL}")
    print(f"\n{Fore.CYAN}Updated values:{Style.RESET_ALL}")
    for key, value in config_updates.items():
        display_value = value
        if any(sensitive in key.lower() for sensitive in ['token', 'key', 'password', 'secret']):
            if value and len(str(value)) > 4:
                display_value = f"{str(value)[:4]}...{'*' * 8}"
        print(f"  {key}: {display_value}")

    print(f"\n{Fore.CYAN}Config file: {config_path}{Style.RESET_ALL}\n")
    return 0
