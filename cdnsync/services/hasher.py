"""
Content digests for change detection.

MD5 is used because S3 reports the MD5 of single-part uploads as the
object's ETag, so a local digest can be compared with the listing
directly.  Digest strength plays no security role here.
"""
import hashlib
from typing import Optional

from ..utils.logger import get_logger

log = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


def hash_file(path) -> Optional[str]:
    """Return the lowercase hex MD5 of a file's full content.

    Args:
        path: File to hash (the post-transform upload source)

    Returns:
        Hex digest, or ``None`` if the file could not be read.  ``None``
        never matches a stored ETag, so the caller re-uploads.
    """
    hasher = hashlib.md5()
    try:
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                hasher.update(chunk)
    except OSError as e:
        log.error("Hash error for %s: %s", path, e)
        return None
    return hasher.hexdigest()
