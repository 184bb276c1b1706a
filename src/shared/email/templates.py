"""Subject, plain-text and HTML bodies for contact inquiry notifications.

Every contact value passed in here is expected to be HTML-escaped already
(see src.shared.contact.input_validation.sanitize_input).
"""

import re
from datetime import datetime, timezone
from typing import Optional

from src.shared.contact.schemas import SanitizedContact

COMPANY_NAME = "Kirknet LLC"

SERVICE_LABELS = {
    "msp": "Managed Services (MSP)",
    "app-development": "App Development",
    "web-development": "Web Development",
    "software-development": "Software Development",
    "it-consultation": "IT Consultation",
    "other": "Other",
}


def get_service_label(service: str) -> str:
    """Map a service code from the form to its display name."""
    return SERVICE_LABELS.get(service, "Not specified")


def format_received_at(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.strftime("%B %d, %Y at %I:%M %p %Z")


def build_subject(contact: SanitizedContact) -> str:
    # Header value: no line breaks allowed
    subject = f"New Contact Inquiry - {contact.service_label} - {contact.name}"
    return re.sub(r"\s*[\r\n]+\s*", " ", subject)


def render_text_body(contact: SanitizedContact, received_at: Optional[datetime] = None) -> str:
    """Plain text version of the notification."""
    rule = "=" * 55
    return f"""
{rule}
NEW CONTACT FORM INQUIRY
{rule}

CONTACT INFORMATION
-------------------
Name:     {contact.name}
Business: {contact.business_name or 'Not provided'}
Email:    {contact.email}
Phone:    {contact.phone_display or contact.phone}

SERVICE OF INTEREST
-------------------
{contact.service_label}

MESSAGE
-------
{contact.message}

{rule}
Received: {format_received_at(received_at)}
"""


def render_html_body(contact: SanitizedContact, received_at: Optional[datetime] = None) -> str:
    """HTML version of the notification. Message line breaks become <br>."""
    message_html = contact.message.replace("\r\n", "\n").replace("\n", "<br>")
    phone = contact.phone_display or contact.phone

    def info_row(label: str, value: str) -> str:
        return f"""
        <div style="background: #f0f9ff; padding: 16px 20px; margin-bottom: 14px; border-radius: 8px; border-left: 4px solid #2563eb;">
            <div style="font-weight: 700; color: #1e40af; margin-bottom: 6px; font-size: 11px; text-transform: uppercase; letter-spacing: 1px;">{label}</div>
            <div style="color: #1f2937; font-size: 16px; font-weight: 500; word-break: break-word;">{value}</div>
        </div>"""

    rows = "".join([
        info_row("Full Name", contact.name),
        info_row("Business Name", contact.business_name or "Not provided"),
        info_row("Email Address", f'<a href="mailto:{contact.email}" style="color: #2563eb;">{contact.email}</a>'),
        info_row("Phone Number", f'<a href="tel:{phone}" style="color: #2563eb;">{phone}</a>'),
        info_row("Service of Interest", contact.service_label),
    ])

    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>New Contact Inquiry - {COMPANY_NAME}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif; line-height: 1.6; color: #1f2937; background-color: #f3f4f6; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background: #ffffff; border-radius: 12px; overflow: hidden;">
        <div style="background: linear-gradient(135deg, #1e3a8a 0%, #2563eb 50%, #3b82f6 100%); color: #ffffff; padding: 40px 30px; text-align: center;">
            <div style="font-size: 14px; letter-spacing: 2px; text-transform: uppercase;">{COMPANY_NAME}</div>
            <h1 style="margin: 0; font-size: 28px;">New Contact Inquiry</h1>
        </div>

        <div style="padding: 40px 30px;">
            <div style="font-size: 18px; font-weight: 700; color: #1e40af; margin-bottom: 20px; border-bottom: 2px solid #dbeafe;">Contact Information</div>
            {rows}

            <div style="background: #fefce8; padding: 24px; margin-top: 30px; border-radius: 10px; border: 2px solid #fde047;">
                <div style="font-weight: 700; color: #854d0e; margin-bottom: 12px; font-size: 14px; text-transform: uppercase;">Message</div>
                <div style="color: #422006; font-size: 15px; line-height: 1.8; background: #ffffff; padding: 16px; border-radius: 6px;">{message_html}</div>
            </div>
        </div>

        <div style="background: #f9fafb; padding: 30px; border-top: 3px solid #e5e7eb; text-align: center; color: #6b7280; font-size: 12px;">
            <div>Received: {format_received_at(received_at)}</div>
            <div style="margin-top: 15px; font-style: italic;">
                This is an automated message from your {COMPANY_NAME} contact form.
            </div>
        </div>
    </div>
</body>
</html>
"""
