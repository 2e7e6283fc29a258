"""
Local directory enumeration.

:func:`iter_local_files` lazily walks the sync root and yields one
:class:`~cdnsync.models.LocalFile` per visible regular file.
:func:`enumerate_into` runs that walk as the producer side of the upload
queue.
"""
import os
import queue

from ..exceptions import EnumerationError
from ..models import LocalFile
from ..utils.logger import get_logger

log = get_logger(__name__)

# Poll interval while blocked on a full queue, so cancellation is noticed
_PUT_TIMEOUT = 0.2


def _is_hidden(name):
    return name.startswith('.')


def make_key(root, path):
    """Strip the root prefix and any leading separator, use ``/`` separators."""
    key = path[len(root):] if path.startswith(root) else os.path.relpath(path, root)
    key = key.replace(os.sep, '/')
    return key.lstrip('/')


def iter_local_files(root):
    """Yield every non-hidden regular file under *root*.

    Hidden entries (base name starting with ``.``) are skipped, and hidden
    directories are pruned with their whole subtree.  The root itself is
    never yielded.

    Args:
        root: Sync root directory

    Raises:
        EnumerationError: root missing/not a directory, or a directory
            could not be listed.  Unreadable files are still yielded.
    """
    if not os.path.isdir(root):
        raise EnumerationError(root, "not a directory")

    def _on_error(err):
        raise EnumerationError(getattr(err, 'filename', None) or root, err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        # Prune hidden subtrees in place
        dirnames[:] = [d for d in dirnames if not _is_hidden(d)]

        for name in filenames:
            if _is_hidden(name):
                continue

            path = os.path.join(dirpath, name)
            try:
                size = os.stat(path).st_size
            except OSError as e:
                # Dangling symlink or file removed mid-walk; the worker records it
                log.warning("Cannot stat %s: %s", path, e)
                size = 0

            yield LocalFile(path=path, key=make_key(root, path), size=size)


def _put(channel, item, cancel_event):
    """Blocking put that gives up once *cancel_event* is set."""
    while True:
        if cancel_event is not None and cancel_event.is_set():
            return False
        try:
            channel.put(item, timeout=_PUT_TIMEOUT)
            return True
        except queue.Full:
            continue


def enumerate_into(root, channel, consumers, sentinel=None, cancel_event=None):
    """Producer loop: walk *root* and feed files into *channel*.

    Always closes the channel by posting one *sentinel* per consumer, even
    when the walk fails or is cancelled.

    Args:
        root: Sync root directory
        channel: Bounded :class:`queue.Queue` shared with the workers
        consumers: Number of workers reading from *channel*
        sentinel: End-of-stream marker
        cancel_event: Optional :class:`threading.Event` stopping the walk

    Returns:
        Number of files enqueued

    Raises:
        EnumerationError: the walk failed (after the channel was closed)
    """
    count = 0
    try:
        for local_file in iter_local_files(root):
            if not _put(channel, local_file, cancel_event):
                log.debug("Enumeration cancelled after %d file(s)", count)
                break
            count += 1
    finally:
        for _ in range(consumers):
            channel.put(sentinel)

    log.debug("Enumerated %d file(s) under %s", count, root)
    return count
