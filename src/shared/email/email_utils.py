"""Email delivery for contact inquiries (Mailjet transactional API or SMTP)."""

import logging
import smtplib
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import unescape

import requests

from src.config import Settings
from src.shared.contact.schemas import SanitizedContact
from src.shared.email.templates import build_subject, render_html_body, render_text_body

MAILJET_SEND_URL = "https://api.mailjet.com/v3.1/send"
MAILJET_TIMEOUT_SECONDS = 15


class EmailNotConfiguredError(RuntimeError):
    """Raised when the email provider credentials are missing."""
    pass


class EmailDeliveryError(RuntimeError):
    """Raised when the email provider rejects or fails to accept a message."""
    pass


def is_email_configured(settings: Settings) -> bool:
    if settings.email_provider == "smtp":
        return bool(settings.smtp_user and settings.smtp_password)
    return bool(settings.mailjet_api_key and settings.mailjet_secret_key)


def build_mailjet_payload(contact: SanitizedContact, settings: Settings, received_at: datetime) -> dict:
    """Build the v3.1 send request body for a single notification message."""
    return {
        "Messages": [
            {
                "From": {"Email": settings.from_email, "Name": settings.from_name},
                "To": [{"Email": settings.to_email, "Name": settings.to_name}],
                # Allow staff to reply directly to the submitter
                "ReplyTo": {"Email": unescape(contact.email), "Name": unescape(contact.name)},
                "Subject": unescape(build_subject(contact)),
                "TextPart": unescape(render_text_body(contact, received_at)),
                "HTMLPart": render_html_body(contact, received_at),
            }
        ]
    }


def send_via_mailjet(contact: SanitizedContact, settings: Settings, received_at: datetime) -> None:
    payload = build_mailjet_payload(contact, settings, received_at)
    try:
        response = requests.post(
            MAILJET_SEND_URL,
            json=payload,
            auth=(settings.mailjet_api_key, settings.mailjet_secret_key),
            timeout=MAILJET_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as e:
        raise EmailDeliveryError(f"Mailjet request failed: {str(e)}") from e

    if response.status_code != 200:
        raise EmailDeliveryError(f"Mailjet returned status {response.status_code}: {response.text[:500]}")

    try:
        messages = response.json().get("Messages", [])
    except ValueError as e:
        raise EmailDeliveryError("Mailjet returned an invalid response body") from e

    if not messages or any(m.get("Status") != "success" for m in messages):
        raise EmailDeliveryError(f"Mailjet did not accept the message: {messages}")


def send_via_smtp(contact: SanitizedContact, settings: Settings, received_at: datetime) -> None:
    # Create message
    msg = MIMEMultipart('alternative')
    msg['From'] = f"{settings.from_name} <{settings.from_email}>"
    msg['To'] = f"{settings.to_name} <{settings.to_email}>"
    msg['Reply-To'] = unescape(contact.email)
    msg['Subject'] = unescape(build_subject(contact))

    # Attach both versions
    msg.attach(MIMEText(unescape(render_text_body(contact, received_at)), 'plain'))
    msg.attach(MIMEText(render_html_body(contact, received_at), 'html'))

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()  # Enable encryption
            server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise EmailDeliveryError(f"SMTP delivery failed: {str(e)}") from e


def send_contact_email(contact: SanitizedContact, settings: Settings) -> None:
    """
    Send the contact inquiry notification once, without retrying.

    Args:
        contact: Validated and escaped submission
        settings: Service configuration selecting and authenticating the provider

    Raises:
        EmailNotConfiguredError: Provider credentials are missing
        EmailDeliveryError: Provider failed to accept the message
    """
    if not is_email_configured(settings):
        logging.error(f"{settings.email_provider} credentials not configured")
        raise EmailNotConfiguredError("Email service not configured")

    received_at = datetime.now(timezone.utc)
    if settings.email_provider == "smtp":
        send_via_smtp(contact, settings, received_at)
    else:
        send_via_mailjet(contact, settings, received_at)
