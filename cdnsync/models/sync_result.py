"""
SyncResult model summarising one sync run
"""
import threading


class SyncResult:
    """Outcome of a sync run.

    ``changed`` is filled by the completion aggregator only; ``skipped``
    and ``failed`` are updated by workers under ``_lock``.
    """

    def __init__(self, dry_run=False):
        self.changed = []
        self.skipped = 0
        self.failed = []
        self.cancelled = False
        self.dry_run = dry_run
        self.distribution_id = None
        self.invalidation_id = None
        self._lock = threading.Lock()

    def record_skip(self):
        with self._lock:
            self.skipped += 1

    def record_failure(self, key, error):
        with self._lock:
            self.failed.append((key, str(error)))

    @property
    def uploaded(self):
        return len(self.changed)

    def to_dict(self):
        """Serialize to dictionary"""
        return {
            "changed": list(self.changed),
            "uploaded": self.uploaded,
            "skipped": self.skipped,
            "failed": [{"key": k, "error": e} for k, e in self.failed],
            "cancelled": self.cancelled,
            "dry_run": self.dry_run,
            "distribution_id": self.distribution_id,
            "invalidation_id": self.invalidation_id,
        }
