"""
Upload worker pool and completion aggregator.

Workers drain a bounded queue of :class:`~cdnsync.models.LocalFile`,
transform and hash each file, compare the digest with the frozen remote
inventory and upload what changed.  Normalized paths of uploaded objects
go onto a second queue drained by a single :class:`CompletionAggregator`.
Both queues are closed with one ``None`` per reader.
"""
import threading

from botocore.exceptions import BotoCoreError, ClientError

from ..utils.logger import get_logger
from ..utils.paths import normalize_remote_path
from .hasher import hash_file
from .transform import DEFAULT_COMPRESS_MIN_SIZE, prepare_upload

log = get_logger(__name__)

SENTINEL = None

# Expected per-file failures, logged without a traceback
_UPLOAD_ERRORS = (ClientError, BotoCoreError, OSError)


class CompletionAggregator(threading.Thread):
    """Single consumer collecting changed paths in arrival order."""

    def __init__(self, channel, result):
        super().__init__(name="cdnsync-aggregator", daemon=True)
        self.channel = channel
        self.result = result

    def run(self):
        while True:
            path = self.channel.get()
            if path is SENTINEL:
                break
            self.result.changed.append(path)


class UploadWorkerPool:
    """N concurrent upload workers sharing one input and one output queue.

    Args:
        store: :class:`~cdnsync.services.aws.operations.S3Operations`
        inventory: Frozen mapping of key to remote digest
        result: :class:`~cdnsync.models.SyncResult` for skip/failure counts
        workers: Number of worker threads
        force: Upload every file regardless of digest
        dry_run: Decide but never upload
        compress_min_size: Compression threshold in bytes
        cancel_event: Optional :class:`threading.Event`; once set, queued
            files are drained without being processed
    """

    def __init__(self, store, inventory, result, workers=8, force=False, dry_run=False,
                 compress_min_size=DEFAULT_COMPRESS_MIN_SIZE, cancel_event=None):
        self.store = store
        self.inventory = inventory
        self.result = result
        self.workers = max(1, int(workers))
        self.force = force
        self.dry_run = dry_run
        self.compress_min_size = compress_min_size
        self.cancel_event = cancel_event or threading.Event()

    def needs_upload(self, key, digest):
        """Skip only when the key exists, force is off and digests match."""
        if self.force:
            return True
        remote = self.inventory.get(key)
        if remote is None:
            return True
        # A missing local digest never matches
        return digest is None or remote != digest

    def process(self, local_file):
        """Handle one file end to end.

        Returns:
            Normalized remote path if the file was (or in dry-run would be)
            uploaded, otherwise None
        """
        try:
            with prepare_upload(local_file, self.compress_min_size) as prepared:
                digest = hash_file(prepared.source_path)

                if not self.needs_upload(local_file.key, digest):
                    log.debug("Unchanged: %s", local_file.key)
                    self.result.record_skip()
                    return None

                if self.dry_run:
                    log.info("Would upload: %s", local_file.key)
                else:
                    log.info("Uploading: %s as %s%s", local_file.path, local_file.key,
                             " (gzip)" if prepared.compressed else "")
                    self.store.put_object(
                        local_file.key,
                        prepared.source_path,
                        prepared.content_type,
                        prepared.content_encoding,
                    )
        except _UPLOAD_ERRORS as e:
            log.error("Failed to upload %s: %s", local_file.key, e)
            self.result.record_failure(local_file.key, e)
            return None

        return normalize_remote_path(local_file.key)

    def _work(self, inbox, outbox):
        while True:
            local_file = inbox.get()
            if local_file is SENTINEL:
                return
            if self.cancel_event.is_set():
                continue
            try:
                path = self.process(local_file)
            except Exception as e:
                # Workers must outlive any single file
                log.exception("Unexpected error on %s", local_file.key)
                self.result.record_failure(local_file.key, e)
                continue
            if path is not None:
                outbox.put(path)

    def run(self, inbox, outbox):
        """Start the workers and block until every one has seen its sentinel.

        Args:
            inbox: Queue of LocalFile, closed with one sentinel per worker
            outbox: Queue receiving normalized paths
        """
        threads = []
        for i in range(self.workers):
            t = threading.Thread(target=self._work, args=(inbox, outbox),
                                 name=f"cdnsync-upload-{i}", daemon=True)
            t.start()
            threads.append(t)

        for t in threads:
            t.join()
