"""
LocalFile model for files discovered under the sync root
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class LocalFile:
    """A candidate file produced by the local enumerator.

    Attributes:
        path: Absolute (or root-joined) filesystem path
        key: Remote object key, relative to the sync root with ``/`` separators
        size: File size in bytes at enumeration time
        is_dir: Directory flag from the walk (always False for emitted files)
    """
    path: str
    key: str
    size: int
    is_dir: bool = False

    @property
    def extension(self):
        """Lowercase extension without the leading dot, or ``""``."""
        base = self.key.rsplit('/', 1)[-1]
        if '.' not in base.lstrip('.'):
            return ""
        return base.rsplit('.', 1)[-1].lower()
