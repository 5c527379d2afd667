"""Server-side verification of MTCaptcha verified tokens.

One ``MTCaptchaClient`` should be created per private key and shared: it
owns a pooled ``httpx.Client`` and is safe to call from many threads.

Every expected failure (connectivity, timeouts, non-200 status, empty or
undecodable body) comes back as data on the ``VerificationResult``. Only a
missing private key or token raises, since those are programming errors.

Docs: https://www.mtcaptcha.com/dev-guide-validate-token
"""

from __future__ import annotations

import logging
import threading

import httpx
from pydantic import TypeAdapter, ValidationError

from mtcaptcha.exceptions import EmptyResponseBodyError, ResponseDecodeError
from mtcaptcha.models import CheckTokenResponse, VerificationResult
from mtcaptcha.settings import get_settings
from mtcaptcha.utils import redact

logger = logging.getLogger(__name__)


def _require_text(value: str | None, name: str) -> str:
    if value is None:
        raise ValueError(f"{name} cannot be None")
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if not value:
        raise ValueError(f"{name} cannot be empty")
    return value


def _close_quietly(response: httpx.Response | None) -> None:
    """Release a response; errors while releasing are never surfaced."""
    if response is None:
        return
    try:
        response.close()
    except Exception as exc:
        logger.debug("Ignoring error while closing response: %s", exc)


class MTCaptchaClient:
    """Checks verified tokens against the MTCaptcha checktoken endpoint.

    Parameters
    ----------
    private_key : Site private key, required.
    connect_timeout_ms : Overrides the process-wide connect timeout.
    read_timeout_ms : Overrides the process-wide read timeout.
    check_token_url : Overrides the checktoken endpoint.
    transport : Optional ``httpx.BaseTransport`` for the pooled client.
    """

    def __init__(
        self,
        private_key: str,
        *,
        connect_timeout_ms: int | None = None,
        read_timeout_ms: int | None = None,
        check_token_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._private_key = _require_text(private_key, "private_key")

        # Defaults are copied now; later changes to settings don't reach this client.
        cfg = get_settings()
        self.connect_timeout_ms = cfg.connect_timeout_ms if connect_timeout_ms is None else connect_timeout_ms
        self.read_timeout_ms = cfg.read_timeout_ms if read_timeout_ms is None else read_timeout_ms
        if self.connect_timeout_ms <= 0 or self.read_timeout_ms <= 0:
            raise ValueError(
                f"Timeouts must be positive, got connect={self.connect_timeout_ms}ms "
                f"read={self.read_timeout_ms}ms"
            )
        if check_token_url is None:
            self.check_token_url = cfg.check_token_url
        else:
            self.check_token_url = _require_text(check_token_url, "check_token_url")

        self._decoder = TypeAdapter(CheckTokenResponse)
        self._http = httpx.Client(
            timeout=httpx.Timeout(
                self.read_timeout_ms / 1000.0,
                connect=self.connect_timeout_ms / 1000.0,
            ),
            limits=httpx.Limits(
                max_connections=cfg.max_connections,
                max_keepalive_connections=cfg.max_keepalive_connections,
            ),
            transport=transport,
        )
        self._lock = threading.Lock()
        self._closed = False
        logger.debug(
            "MTCaptchaClient initialized: key=%s, url=%s, connect=%dms, read=%dms",
            redact(self._private_key), self.check_token_url, self.connect_timeout_ms, self.read_timeout_ms,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def verify(self, token: str) -> VerificationResult:
        """Check a verified token and return the full result.

        Always returns a ``VerificationResult``; ``success`` tells whether
        the token is valid and ``unexpected_error`` holds anything that
        prevented a decision. Raises ``ValueError`` for a missing token.
        """
        token = _require_text(token, "token")
        url = self._build_url(token)

        status_code, status_message, body, error = self._exchange(url)

        payload: CheckTokenResponse | None = None
        if error is None and status_code == 200:
            try:
                payload = self._decode(body)
            except (EmptyResponseBodyError, ResponseDecodeError) as exc:
                error = exc

        result = VerificationResult.from_payload(
            payload,
            http_status_code=status_code,
            http_status_message=status_message,
            raw_response_body=body,
            unexpected_error=error,
        )
        logger.debug(
            "checktoken finished: status=%d success=%s error=%s",
            result.http_status_code, result.success,
            type(error).__name__ if error is not None else None,
        )
        return result

    def get_token_info(self, token: str) -> VerificationResult:
        """Alias of :meth:`verify`."""
        return self.verify(token)

    def is_valid(self, token: str) -> bool:
        """True if the token verified successfully.

        Also False on errors such as a bad private key or connectivity issues.
        """
        return self.verify(token).success

    is_token_valid = is_valid

    def close(self) -> None:
        """Drop pooled connections and release the transport.

        Safe to call more than once and from several threads. Requests
        already in flight are not cancelled.
        """
        with self._lock:
            if self._closed:
                return
            self._http.close()
            self._closed = True
            logger.debug("MTCaptchaClient closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> MTCaptchaClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(check_token_url={self.check_token_url!r}, closed={self._closed})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_url(self, token: str) -> str:
        # Values are appended as already encoded; callers supply URL-safe text.
        separator = "&" if "?" in self.check_token_url else "?"
        return f"{self.check_token_url}{separator}privatekey={self._private_key}&token={token}"

    def _exchange(self, url: str) -> tuple[int, str | None, str | None, BaseException | None]:
        """Run the GET and return (status, reason, body, error).

        Status and reason stay unset unless the whole response was read.
        """
        response: httpx.Response | None = None
        try:
            request = self._http.build_request("GET", url)
            response = self._http.send(request, stream=True)
            response.read()
            return response.status_code, response.reason_phrase, response.text or None, None
        except Exception as exc:
            logger.debug("checktoken request failed: %s", type(exc).__name__)
            return 0, None, None, exc
        finally:
            _close_quietly(response)

    def _decode(self, body: str | None) -> CheckTokenResponse:
        if body is None:
            raise EmptyResponseBodyError("Unexpected, no HTTP body found")
        try:
            return self._decoder.validate_json(body)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"Could not decode checktoken response ({exc.error_count()} error(s))"
            ) from exc
