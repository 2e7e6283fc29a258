"""
Data models for cdnsync
"""

from .local_file import LocalFile
from .sync_result import SyncResult

__all__ = ['LocalFile', 'SyncResult']
