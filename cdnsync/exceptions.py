"""
Exception hierarchy for cdnsync.

Fatal conditions raise a :class:`CdnSyncError` subclass and abort the
run.  Per-file problems are never raised past the worker that hit them.
"""


class CdnSyncError(Exception):
    """Base class for all run-level failures."""


class ConfigError(CdnSyncError):
    """Invalid or unreadable configuration."""


class InventoryError(CdnSyncError):
    """Remote object listing could not be completed."""

    def __init__(self, bucket, cause):
        self.bucket = bucket
        self.cause = cause
        super().__init__(f"Failed to list objects in bucket '{bucket}': {cause}")


class EnumerationError(CdnSyncError):
    """Local directory walk failed."""

    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to walk '{path}': {cause}")


class InvalidationError(CdnSyncError):
    """CloudFront listing or invalidation request failed."""


class DistributionNotFoundError(InvalidationError):
    """No CloudFront distribution carries the requested alias."""

    def __init__(self, domain):
        self.domain = domain
        super().__init__(f"No CloudFront distribution has alias '{domain}'")
