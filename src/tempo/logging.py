"""Logging setup for tempo.

Library modules only ask for named child loggers (``tempo.runner``,
``tempo.suite`` ...) and never configure handlers themselves; a program
embedding tempo keeps full control of its logging. The ``tempo`` CLI
calls :func:`setup_logging` once per command.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "tempo"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"
# Per-iteration progress is only readable with the emitting module shown.
_VERBOSE_CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the ``tempo`` logger for a command-line run.

    Calling it again replaces the handlers installed by the previous
    call; their streams and files are closed first.

    Args:
        verbose: Show DEBUG records (per-iteration progress) on the console.
        quiet: Show only warnings and errors. Ignored if *verbose* is True.
        log_file: Also write every record, at DEBUG level, to this file.
            Missing parent directories are created.

    Returns:
        The configured ``tempo`` logger.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(
        logging.Formatter(_VERBOSE_CONSOLE_FORMAT if verbose else _CONSOLE_FORMAT)
    )
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``tempo.<name>`` child logger.

    A *name* that already carries the ``tempo.`` prefix is used as is.
    """
    if name == _LOGGER_NAME or name.startswith(_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
