"""
MTCaptcha server-side SDK
Verifies MTCaptcha verified tokens against the checktoken service.
"""

import logging

__version__ = "1.0.0"

from mtcaptcha.client import MTCaptchaClient
from mtcaptcha.exceptions import EmptyResponseBodyError, MTCaptchaError, ResponseDecodeError
from mtcaptcha.models import CheckTokenResponse, VerificationResult
from mtcaptcha.settings import (
    MTCaptchaSettings,
    get_settings,
    reload_settings,
    set_default_timeouts,
)
from mtcaptcha.utils import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MTCaptchaClient",
    "VerificationResult",
    "CheckTokenResponse",
    "MTCaptchaError",
    "EmptyResponseBodyError",
    "ResponseDecodeError",
    "MTCaptchaSettings",
    "get_settings",
    "reload_settings",
    "set_default_timeouts",
    "setup_logging",
]
