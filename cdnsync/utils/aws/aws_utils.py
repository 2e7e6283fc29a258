"""AWS utilities for session management.

All S3 and CloudFront clients used by cdnsync come from one
:class:`boto3.Session` built here, so profile and region selection
happen in a single place.
"""
from typing import Optional

from ..logger import get_logger

log = get_logger(__name__)


def _import_boto3():
    """Lazily import boto3, logging a helpful hint if it is not installed."""
    try:
        import boto3
        return boto3
    except ImportError:
        log.error("boto3 is required but is not installed.")
        log.error("Install it with: pip install cdnsync")
        raise


def create_boto3_session(
    profile_name: Optional[str] = None,
    region_name: Optional[str] = None
):
    """Create a boto3 session for the given profile and region.

    Empty strings are treated as "not set" so values read straight from
    config.json fall back to the default credential chain.

    Args:
        profile_name: AWS profile name
        region_name: Optional AWS region

    Returns:
        boto3.Session object

    Example:
        >>> session = create_boto3_session('site-deploy', 'us-east-1')
        >>> s3 = session.client('s3')
    """
    boto3 = _import_boto3()
    session = boto3.Session(
        profile_name=profile_name or None,
        region_name=region_name or None,
    )
    log.debug("AWS session ready (profile=%s, region=%s)",
              profile_name or "default", session.region_name or "default")
    return session
