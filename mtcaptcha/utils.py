"""
Logging helpers for the MTCaptcha client.

The library only emits DEBUG records under the ``mtcaptcha`` logger;
applications opt in to seeing them with ``setup_logging``.
"""

import logging
from typing import Optional

from mtcaptcha.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_PACKAGE_LOGGER = "mtcaptcha"


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Calling it again only updates the level.
    """
    level_name = (log_level or get_settings().log_level).upper()
    level = getattr(logging, level_name)

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    if not any(getattr(h, "_mtcaptcha_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._mtcaptcha_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def redact(value: Optional[str], visible: int = 4) -> str:
    """Mask a secret for log output, keeping the first few characters."""
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "****"
