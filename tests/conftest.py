"""Shared test fixtures for the MTCaptcha test suite."""

import os

import httpx
import pytest

# Keep the developer's environment from leaking into default settings
for _name in list(os.environ):
    if _name.startswith("MTCAPTCHA_"):
        del os.environ[_name]

TEST_PRIVATE_KEY = "MTPrivat-test-private-key"
TEST_TOKEN = "v1(2f03cc7d,1058dfde,MTPublic-hal9000uJ,34715559cd42d3955114303c925c3582,kSdkIYA)"


@pytest.fixture(autouse=True)
def _reset_settings():
    """Reset the settings singleton around each test."""
    import mtcaptcha.settings
    mtcaptcha.settings._settings = None
    yield
    mtcaptcha.settings._settings = None


@pytest.fixture
def sample_success_payload():
    """A typical checktoken body for a solved captcha."""
    return {
        "success": True,
        "tokeninfo": {
            "v": "1.0",
            "code": 301,
            "codeDesc": "valid-test:captcha-solved-via-testkey",
            "tokID": "6b5a87ab80369d660e3fe2ceb8eb84ac",
            "timestampSec": 1572371631,
            "timestampISO": "2019-10-29T17:53:51Z",
            "hostname": "some.example.com",
            "isDevHost": False,
            "action": "login",
            "ip": "1.1.1.1",
        },
    }


@pytest.fixture
def sample_failure_payload():
    """A checktoken body for an expired token."""
    return {
        "success": False,
        "fail_codes": ["token-expired"],
        "tokeninfo": {
            "v": "1.0",
            "code": 201,
            "codeDesc": "token-expired",
            "tokID": "ae1e60a1e249c217cb7b05c4dba8dd0d",
            "timestampSec": 1572371631,
            "timestampISO": "2019-10-29T17:53:51Z",
            "hostname": "some.example.com",
            "isDevHost": False,
            "action": "",
            "ip": "10.10.10.10",
        },
    }


@pytest.fixture
def recorded_requests():
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(recorded_requests):
    """Build a client whose transport is answered by ``handler``.

    ``handler`` receives the ``httpx.Request`` and returns an
    ``httpx.Response`` (or raises, to simulate transport failures).
    """
    from mtcaptcha.client import MTCaptchaClient

    clients = []

    def _factory(handler, private_key=TEST_PRIVATE_KEY, **kwargs):
        def _recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        client = MTCaptchaClient(
            private_key,
            transport=httpx.MockTransport(_recording_handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield _factory

    for client in clients:
        client.close()
