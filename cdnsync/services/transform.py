"""
Per-file transform stage: gzip compression and media-type classification.

:func:`prepare_upload` decides what bytes are actually sent for a
:class:`~cdnsync.models.LocalFile` and with which ``Content-Encoding``
and ``Content-Type``.  Compressed output goes to a temporary file that
is removed when the context exits, whatever happens to the upload.
"""
import gzip
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

from ..utils.logger import get_logger
from ..utils.media_types import (
    SNIFF_LENGTH,
    content_type_for_extension,
    is_compressible,
    sniff_content_type,
)

log = get_logger(__name__)

DEFAULT_COMPRESS_MIN_SIZE = 500
TEMP_PREFIX = "cdnsync-"


@dataclass(frozen=True)
class PreparedUpload:
    """What the transform stage decided for one file."""
    source_path: str
    content_type: str
    content_encoding: Optional[str] = None

    @property
    def compressed(self):
        return self.content_encoding == "gzip"


def should_compress(local_file, min_size=DEFAULT_COMPRESS_MIN_SIZE):
    """Compress unless the extension is blacklisted or the file is small.

    Args:
        local_file: Candidate file
        min_size: Files must be strictly larger than this many bytes

    Returns:
        True if the file should be gzip-compressed before upload
    """
    return is_compressible(local_file.extension) and local_file.size > min_size


def detect_content_type(local_file):
    """Classify a file by extension, sniffing the original bytes on miss.

    Raises:
        OSError: the file could not be opened for sniffing
    """
    content_type = content_type_for_extension(local_file.extension)
    if content_type:
        return content_type

    with open(local_file.path, 'rb') as f:
        head = f.read(SNIFF_LENGTH)

    content_type = sniff_content_type(head)
    log.debug("Detected MIME for %s: %s", local_file.key, content_type)
    return content_type


def compress_to_temp(path):
    """Gzip *path* at maximum compression into a new temporary file.

    Returns:
        Path of the temporary file (caller removes it)
    """
    fd, temp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=".gz")
    try:
        with os.fdopen(fd, 'wb') as raw, open(path, 'rb') as source:
            # mtime=0 keeps the output byte-identical across runs
            with gzip.GzipFile(filename="", mode='wb', fileobj=raw,
                               compresslevel=9, mtime=0) as gz:
                shutil.copyfileobj(source, gz)
    except BaseException:
        _remove_quietly(temp_path)
        raise
    return temp_path


def _remove_quietly(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning("Could not remove temporary file %s: %s", path, e)


@contextmanager
def prepare_upload(local_file, compress_min_size=DEFAULT_COMPRESS_MIN_SIZE):
    """Transform a file for upload.

    Yields a :class:`PreparedUpload`.  A compressed temporary file, if
    one was created, is deleted on every exit path.

    Args:
        local_file: File to transform
        compress_min_size: Compression threshold in bytes

    Raises:
        OSError: the original file could not be read
    """
    content_type = detect_content_type(local_file)

    if not should_compress(local_file, compress_min_size):
        yield PreparedUpload(local_file.path, content_type)
        return

    log.debug("Compressing: %s", local_file.path)
    temp_path = compress_to_temp(local_file.path)
    try:
        yield PreparedUpload(temp_path, content_type, content_encoding="gzip")
    finally:
        _remove_quietly(temp_path)
