"""
AWS synchronization service package.

- :mod:`operations`  — S3 inventory listing and object upload
- :mod:`cloudfront`  — distribution lookup and invalidation batches
- :mod:`sync_engine` — one-way incremental sync run
"""
from .sync_engine import SyncEngine
from .operations import S3Operations
from .cloudfront import CloudFrontOperations

__all__ = [
    'SyncEngine',
    'S3Operations',
    'CloudFrontOperations',
]
