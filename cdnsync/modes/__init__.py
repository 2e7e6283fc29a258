"""Mode handlers for cdnsync CLI.

This package contains mode-specific handlers that encapsulate
the workflow logic for each subcommand.

Subcommand handlers:
  - SyncHandler        → cdnsync sync
  - InvalidateHandler  → cdnsync invalidate
"""
from .base_handler import ModeHandler
from .sync_handler import SyncHandler
from .invalidate_handler import InvalidateHandler

__all__ = [
    'ModeHandler',
    'SyncHandler',
    'InvalidateHandler',
]
