"""Centralized logging configuration for bucketmirror.

Coloured console output via *colorama*. Progress lines (uploads,
metadata updates, redirects, deletions) are logged at ``INFO``; skip
and no-op decisions go to ``DEBUG`` and only show with ``--verbose``.

Usage::

    from bucketmirror.utils.logger import get_logger

    log = get_logger(__name__)
    log.info('Uploading "%s"', rel_path)
    log.debug('Skipping "%s" because hashes and metadata match', rel_path)
"""
import logging
import sys

from colorama import Fore, Style

__all__ = ["get_logger", "setup_logging"]

_LEVEL_COLOURS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColouredFormatter(logging.Formatter):
    """Formatter that prepends coloured level tags to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        colour = _LEVEL_COLOURS.get(record.levelno, "")
        msg = super().format(record)
        return f"{colour}[{record.levelname}]{Style.RESET_ALL} {msg}"


_ROOT_LOGGER_NAME = "bucketmirror"
_configured = False


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the root *bucketmirror* logger.

    At the default ``INFO`` level a run prints one line per upload,
    metadata update, redirect and deletion, plus the start and summary
    lines. ``--verbose`` adds the ``DEBUG`` channel: skipped files, the
    reason a metadata copy was chosen, and orphans kept by
    ``--no-delete``. ``--quiet`` leaves only warnings and the fatal
    error that ends a failed run.

    Args:
        verbose: If *True*, set level to ``DEBUG``.
        quiet: If *True*, set level to ``WARNING`` (overrides *verbose*).
    """
    global _configured  # noqa: PLW0603

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColouredFormatter("%(message)s"))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the *bucketmirror* namespace.

    Applies a default ``INFO`` configuration if :func:`setup_logging`
    has not run yet.
    """
    if not _configured:
        setup_logging()

    if not name.startswith(_ROOT_LOGGER_NAME):
        name = f"{_ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
