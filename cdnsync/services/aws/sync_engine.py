"""
One-way S3 synchronization engine.

Provides :class:`SyncEngine`, which wires the inventory fetcher, the
local enumerator, the upload worker pool, the completion aggregator and
the invalidation batcher into a single run:

1. fetch the remote inventory (fatal on failure, frozen afterwards)
2. start the enumerator thread feeding a bounded queue
3. run N upload workers against that queue
4. collect changed paths, then invalidate them in one batch
"""
import queue
import threading

from ...exceptions import EnumerationError
from ...models import SyncResult
from ...utils.logger import get_logger
from ..enumerator import enumerate_into
from ..transform import DEFAULT_COMPRESS_MIN_SIZE
from ..worker_pool import SENTINEL, CompletionAggregator, UploadWorkerPool

log = get_logger(__name__)

DEFAULT_QUEUE_SIZE = 100
DEFAULT_WORKERS = 8


class SyncEngine:
    """Runs incremental uploads from a local tree to one bucket.

    Args:
        store: :class:`~.operations.S3Operations` bound to the target bucket
        cdn: :class:`~.cloudfront.CloudFrontOperations`, or None to never
            invalidate
        workers: Number of concurrent upload workers
        queue_size: Capacity of both internal queues
        compress_min_size: Compression threshold in bytes
        cancel_event: Optional :class:`threading.Event` to stop a run early
    """

    def __init__(self, store, cdn=None, workers=DEFAULT_WORKERS, queue_size=DEFAULT_QUEUE_SIZE,
                 compress_min_size=DEFAULT_COMPRESS_MIN_SIZE, cancel_event=None):
        self.store = store
        self.cdn = cdn
        self.workers = workers
        self.queue_size = queue_size
        self.compress_min_size = compress_min_size
        self.cancel_event = cancel_event or threading.Event()
        self._run_stop = None

    def cancel(self):
        """Stop feeding new files; in-flight uploads finish, no invalidation."""
        self.cancel_event.set()
        if self._run_stop is not None:
            self._run_stop.set()

    def upload_changed(self, root, inventory, force=False, dry_run=False):
        """Upload every file under *root* that differs from *inventory*.

        Args:
            root: Local sync root
            inventory: Frozen key → digest mapping
            force: Upload everything
            dry_run: Report without uploading

        Returns:
            :class:`SyncResult` with ``changed`` filled in arrival order

        Raises:
            EnumerationError: the local walk failed
        """
        result = SyncResult(dry_run=dry_run)
        files = queue.Queue(maxsize=self.queue_size)
        done = queue.Queue(maxsize=self.queue_size)

        # Per-run stop flag: set by cancel() or by a failed walk
        stop = threading.Event()
        self._run_stop = stop
        if self.cancel_event.is_set():
            stop.set()

        pool = UploadWorkerPool(
            self.store, inventory, result,
            workers=self.workers,
            force=force,
            dry_run=dry_run,
            compress_min_size=self.compress_min_size,
            cancel_event=stop,
        )

        walk_errors = []

        def produce():
            try:
                enumerate_into(root, files, pool.workers, SENTINEL, stop)
            except EnumerationError as e:
                walk_errors.append(e)
                stop.set()

        producer = threading.Thread(target=produce, name="cdnsync-enumerator", daemon=True)
        aggregator = CompletionAggregator(done, result)

        producer.start()
        aggregator.start()
        pool.run(files, done)
        producer.join()
        done.put(SENTINEL)
        aggregator.join()
        self._run_stop = None

        if walk_errors:
            raise walk_errors[0]

        result.cancelled = self.cancel_event.is_set()
        return result

    def sync(self, root, domain=None, force=False, dry_run=False, invalidate=True):
        """Run one full sync.

        Args:
            root: Local sync root
            domain: CloudFront alias to invalidate; defaults to the bucket name
            force: Upload every file regardless of digest
            dry_run: Decide but never upload or invalidate
            invalidate: Set False to skip the CloudFront step

        Returns:
            :class:`SyncResult`

        Raises:
            InventoryError, EnumerationError, InvalidationError: fatal failures
        """
        inventory = self.store.fetch_inventory()

        result = self.upload_changed(root, inventory, force=force, dry_run=dry_run)

        log.info("%d uploaded, %d unchanged, %d failed",
                 result.uploaded, result.skipped, len(result.failed))

        if result.cancelled:
            log.warning("Sync cancelled, skipping invalidation")
            return result
        if dry_run or not invalidate or self.cdn is None:
            return result

        outcome = self.cdn.invalidate(domain or self.store.bucket_name, list(result.changed))
        if outcome:
            result.distribution_id, result.invalidation_id = outcome
        return result
