"""Shared fixtures for contact service tests."""

import pytest
from fastapi.testclient import TestClient

from src.app import create_app
from src.config import Settings
from src.shared.contact.rate_limiting import FixedWindowRateLimiter


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCaptchaVerifier:
    def __init__(self, result: bool = True):
        self.result = result
        self.calls = []

    def verify(self, token, remote_ip=None):
        self.calls.append((token, remote_ip))
        return self.result


@pytest.fixture
def settings():
    return Settings(
        hostname="kirknetllc.com",
        mailjet_api_key="mj-key",
        mailjet_secret_key="mj-secret",
        captcha_secret_key="captcha-secret",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    return FixedWindowRateLimiter(max_requests=3, window_seconds=300, clock=clock)


@pytest.fixture
def captcha_verifier():
    return FakeCaptchaVerifier()


@pytest.fixture
def app(settings, rate_limiter, captcha_verifier):
    return create_app(settings=settings, rate_limiter=rate_limiter, captcha_verifier=captcha_verifier)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing notifications instead of calling the provider."""
    sent = []

    def fake_send(contact, settings):
        sent.append(contact)

    monkeypatch.setattr("src.shared.contact.routes.send_contact_email", fake_send)
    return sent


@pytest.fixture
def valid_payload():
    return {
        "name": "Jane Doe",
        "businessName": "Acme Corp",
        "phone": "(555) 123-4567",
        "email": "jane.doe@acmecorp.com",
        "service": "web-development",
        "message": "We need a new website for our business.",
        "captchaToken": "token-123",
        "honeypot": "",
    }
