"""Console logging for cdnsync.

Every module logs through ``get_logger(__name__)``; records end up on a
single stderr handler attached to the ``cdnsync`` logger, tagged with a
coloured ``[LEVEL]`` prefix.  ``main()`` calls :func:`setup_logging` once
with the ``--verbose`` / ``--quiet`` flags.

boto3 and botocore log every request at DEBUG, so they stay at WARNING
unless ``--verbose`` is given.
"""
import logging
import sys

from colorama import Fore, Style

__all__ = ["get_logger", "setup_logging"]

_ROOT_LOGGER_NAME = "cdnsync"

_LEVEL_COLOURS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}

_AWS_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")

_configured = False


class ColouredFormatter(logging.Formatter):
    """``[LEVEL] message`` with the tag coloured per level."""

    def format(self, record: logging.LogRecord) -> str:
        tag = f"{_LEVEL_COLOURS.get(record.levelno, '')}[{record.levelname}]{Style.RESET_ALL}"
        return f"{tag} {super().format(record)}"


def _pick_level(verbose: bool, quiet: bool) -> int:
    # --quiet wins over --verbose
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose else logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set the cdnsync log level and install the stderr handler.

    Safe to call more than once; later calls only change levels.
    """
    global _configured  # noqa: PLW0603

    level = _pick_level(verbose, quiet)
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColouredFormatter("%(message)s"))
        logger.addHandler(handler)

    aws_level = logging.DEBUG if verbose else logging.WARNING
    for name in _AWS_LOGGERS:
        logging.getLogger(name).setLevel(aws_level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for *name*, nested under ``cdnsync``.

    Falls back to INFO-level defaults when :func:`setup_logging` has not
    run yet (library use, tests).
    """
    if not _configured:
        setup_logging()

    if name != _ROOT_LOGGER_NAME and not name.startswith(_ROOT_LOGGER_NAME + "."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
