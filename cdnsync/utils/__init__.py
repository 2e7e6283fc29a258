"""Utility modules for cdnsync.

Sub-packages:
- aws/ — AWS session management
"""

from .config_loader import ConfigLoader, handle_config_update, validate_config
from .logger import get_logger, setup_logging
from .media_types import sniff_content_type
from .paths import normalize_remote_path

__all__ = [
    'ConfigLoader',
    'handle_config_update',
    'validate_config',
    'get_logger',
    'setup_logging',
    'sniff_content_type',
    'normalize_remote_path',
]
