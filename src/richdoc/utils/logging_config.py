"""Logging setup shared by the CLI and the server."""

from __future__ import annotations

import logging
import sys

_PACKAGE_LOGGER = "richdoc"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes present on every LogRecord; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends ``extra={...}`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not extras:
            return base
        fields = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{base} [{fields}]"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name``."""
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.INFO, *, stream=None) -> logging.Logger:
    """Attach a single stream handler to the package and server loggers.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ExtraFieldsFormatter(_FORMAT))

    for name in (_PACKAGE_LOGGER, "server"):
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if getattr(existing, "_richdoc_handler", False):
                logger.removeHandler(existing)
        handler._richdoc_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

    return logging.getLogger(_PACKAGE_LOGGER)
