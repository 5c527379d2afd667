"""Model objects for the checktoken exchange.

``CheckTokenResponse`` decodes the JSON body returned by the service, which
looks like::

    {
      "success": true,
      "tokeninfo": {
        "v": "1.0",
        "code": 301,
        "codeDesc": "valid-test:captcha-solved-via-testkey",
        "tokID": "6b5a87ab80369d660e3fe2ceb8eb84ac",
        "timestampSec": 1572371631,
        "timestampISO": "2019-10-29T17:53:51Z",
        "hostname": "some.example.com",
        "isDevHost": false,
        "action": "login",
        "ip": "1.1.1.1"
      }
    }

``VerificationResult`` is what callers get back from a check.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator


def _to_text(value: Any) -> Any:
    """Render a JSON scalar as a string; leave containers for validation to reject."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Wire model
# ---------------------------------------------------------------------------

class CheckTokenResponse(BaseModel):
    """Body of a checktoken response. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    success: StrictBool = False
    fail_codes: list[str] | None = None
    tokeninfo: dict[str, str] | None = None

    @field_validator("success", mode="before")
    @classmethod
    def coerce_none_to_false(cls, v):
        return False if v is None else v

    @field_validator("fail_codes", mode="before")
    @classmethod
    def stringify_fail_codes(cls, v):
        if isinstance(v, list):
            return [_to_text(item) for item in v]
        return v

    @field_validator("tokeninfo", mode="before")
    @classmethod
    def stringify_tokeninfo(cls, v):
        # tokeninfo is opaque: any flat object is accepted, values become strings.
        if isinstance(v, dict):
            return {str(key): _to_text(item) for key, item in v.items()}
        return v


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

def _describe_error(error: BaseException | None) -> str | None:
    if error is None:
        return None
    return f"{type(error).__name__}: {error}"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one token check.

    ``success`` is true only when the service answered 200 with a decodable
    body whose own ``success`` flag was true. The remaining fields are
    diagnostics: ``http_status_code`` is 0 when no response arrived, and
    ``unexpected_error`` holds whatever prevented a decision (transport
    failure, empty body, undecodable body). A non-200 status is reported as
    an unsuccessful result without an error.
    """

    success: bool = False
    fail_codes: tuple[str, ...] | None = None
    token_info: Mapping[str, str] | None = None
    http_status_code: int = 0
    http_status_message: str | None = None
    raw_response_body: str | None = None
    unexpected_error: BaseException | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.success and self.unexpected_error is not None:
            raise ValueError("A successful result cannot carry an unexpected error")
        if self.fail_codes is not None and not isinstance(self.fail_codes, tuple):
            object.__setattr__(self, "fail_codes", tuple(self.fail_codes))
        if self.token_info is not None and not isinstance(self.token_info, MappingProxyType):
            object.__setattr__(self, "token_info", MappingProxyType(dict(self.token_info)))

    @classmethod
    def from_payload(
        cls,
        payload: CheckTokenResponse | None,
        *,
        http_status_code: int = 0,
        http_status_message: str | None = None,
        raw_response_body: str | None = None,
        unexpected_error: BaseException | None = None,
    ) -> VerificationResult:
        """Combine a decoded payload (or none) with the exchange diagnostics."""
        if payload is None:
            return cls(
                http_status_code=http_status_code,
                http_status_message=http_status_message,
                raw_response_body=raw_response_body,
                unexpected_error=unexpected_error,
            )
        return cls(
            success=payload.success and unexpected_error is None,
            fail_codes=payload.fail_codes,
            token_info=payload.tokeninfo,
            http_status_code=http_status_code,
            http_status_message=http_status_message,
            raw_response_body=raw_response_body,
            unexpected_error=unexpected_error,
        )

    @property
    def is_error(self) -> bool:
        """True when the outcome could not be determined."""
        return self.unexpected_error is not None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "fail_codes": list(self.fail_codes) if self.fail_codes is not None else None,
            "token_info": dict(self.token_info) if self.token_info is not None else None,
            "http_status_code": self.http_status_code,
            "http_status_message": self.http_status_message,
            "raw_response_body": self.raw_response_body,
            "unexpected_error": _describe_error(self.unexpected_error),
        }

    def to_json(self, indent: int | None = None) -> str:
        """Serialize for logging and inspection."""
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        return self.to_json()
