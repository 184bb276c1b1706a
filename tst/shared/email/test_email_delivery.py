import smtplib
from datetime import datetime, timezone

import pytest
import requests

from src.config import Settings
from src.shared.contact.schemas import SanitizedContact
from src.shared.email import email_utils
from src.shared.email.email_utils import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    build_mailjet_payload,
    send_contact_email,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body if body is not None else {"Messages": [{"Status": "success"}]}
        self.text = str(self._body)

    def json(self):
        return self._body


@pytest.fixture
def contact():
    return SanitizedContact(
        name="Tom &amp; Jerry",
        business_name="Acme",
        email="tom@acmecorp.com",
        phone="5551234567",
        phone_display="(555) 123-4567",
        service="other",
        service_label="Other",
        message="Hello there, &lt;world&gt;",
    )


@pytest.fixture
def mailjet_settings():
    return Settings(mailjet_api_key="key", mailjet_secret_key="secret", to_email="inbox@kirknetllc.com")


def test_mailjet_payload(contact, mailjet_settings):
    payload = build_mailjet_payload(contact, mailjet_settings, datetime(2026, 1, 2, tzinfo=timezone.utc))

    message = payload["Messages"][0]
    assert message["From"] == {"Email": "noreply@kirknetllc.com", "Name": "Kirknet Message"}
    assert message["To"] == [{"Email": "inbox@kirknetllc.com", "Name": "Kirknet LLC"}]
    assert message["ReplyTo"] == {"Email": "tom@acmecorp.com", "Name": "Tom & Jerry"}
    assert message["Subject"] == "New Contact Inquiry - Other - Tom & Jerry"
    assert "Hello there, <world>" in message["TextPart"]
    assert "Hello there, &lt;world&gt;" in message["HTMLPart"]


def test_send_via_mailjet_posts_once(contact, mailjet_settings, monkeypatch):
    calls = []

    def fake_post(url, json=None, auth=None, timeout=None):
        calls.append({"url": url, "json": json, "auth": auth})
        return FakeResponse()

    monkeypatch.setattr("src.shared.email.email_utils.requests.post", fake_post)

    send_contact_email(contact, mailjet_settings)

    assert len(calls) == 1
    assert calls[0]["url"] == "https://api.mailjet.com/v3.1/send"
    assert calls[0]["auth"] == ("key", "secret")


@pytest.mark.parametrize("reply", [
    FakeResponse(status_code=401, body={"ErrorMessage": "unauthorized"}),
    FakeResponse(body={"Messages": [{"Status": "error"}]}),
    requests.exceptions.ConnectionError("unreachable"),
])
def test_mailjet_failures_raise_delivery_error(contact, mailjet_settings, monkeypatch, reply):
    def fake_post(url, json=None, auth=None, timeout=None):
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr("src.shared.email.email_utils.requests.post", fake_post)

    with pytest.raises(EmailDeliveryError):
        send_contact_email(contact, mailjet_settings)


def test_missing_credentials(contact):
    with pytest.raises(EmailNotConfiguredError):
        send_contact_email(contact, Settings(mailjet_api_key="key"))

    with pytest.raises(EmailNotConfiguredError):
        send_contact_email(contact, Settings(email_provider="smtp", smtp_user="me"))


class FakeSMTP:
    instances = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.sent = []
        self.logged_in = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        self.sent.append(msg)


def test_smtp_delivery(contact, monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_utils.smtplib, "SMTP", FakeSMTP)
    settings = Settings(email_provider="smtp", smtp_user="me@gmail.com", smtp_password="pw")

    send_contact_email(contact, settings)

    server = FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.gmail.com", 587)
    assert server.logged_in == ("me@gmail.com", "pw")
    msg = server.sent[0]
    assert msg["Reply-To"] == "tom@acmecorp.com"
    assert msg["Subject"] == "New Contact Inquiry - Other - Tom & Jerry"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_smtp_errors_raise_delivery_error(contact, monkeypatch):
    class BrokenSMTP(FakeSMTP):
        def login(self, user, password):
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(email_utils.smtplib, "SMTP", BrokenSMTP)
    settings = Settings(email_provider="smtp", smtp_user="me@gmail.com", smtp_password="pw")

    with pytest.raises(EmailDeliveryError):
        send_contact_email(contact, settings)


def test_smtp_subject_with_line_break_is_sent_on_one_line(monkeypatch):
    from src.shared.contact.input_validation import validate_submission
    from src.shared.contact.schemas import ContactSubmission

    FakeSMTP.instances = []
    monkeypatch.setattr(email_utils.smtplib, "SMTP", FakeSMTP)
    settings = Settings(email_provider="smtp", smtp_user="me@gmail.com", smtp_password="pw")
    contact = validate_submission(ContactSubmission(
        name="Jane\nBcc: victim@acmecorp.com",
        phone="5551234567",
        email="jane@acmecorp.com",
        service="msp",
        message="Please get in touch with me.",
    ))

    send_contact_email(contact, settings)

    msg = FakeSMTP.instances[0].sent[0]
    assert msg["Subject"] == "New Contact Inquiry - Managed Services (MSP) - Jane Bcc: victim@acmecorp.com"
    assert msg["Bcc"] is None
