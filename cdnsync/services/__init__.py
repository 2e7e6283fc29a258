"""
Sync services for cdnsync.

- enumerator  - lazy walk of the local tree, producer thread body
- transform   - gzip compression and media-type classification
- hasher      - content digests for change detection
- worker_pool - upload workers and completion aggregator
- aws/        - S3 and CloudFront collaborators, sync engine
"""
from .aws.sync_engine import SyncEngine
from .worker_pool import UploadWorkerPool, CompletionAggregator

__all__ = [
    'SyncEngine',
    'UploadWorkerPool',
    'CompletionAggregator',
]
