"""Errors recorded on a VerificationResult when a check cannot be decided."""


class MTCaptchaError(Exception):
    """Base class for errors raised inside the verification pipeline."""


class EmptyResponseBodyError(MTCaptchaError):
    """The service answered 200 but sent no body."""


class ResponseDecodeError(MTCaptchaError):
    """The response body was not a valid checktoken payload.

    The underlying JSON or validation error is chained as ``__cause__``.
    """
