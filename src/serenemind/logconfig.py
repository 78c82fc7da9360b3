from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
ROOT_LOGGER = "serenemind"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach one stderr handler to the package logger. Safe to call twice."""

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(getattr(h, "_serenemind", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._serenemind = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
