"""
Input validation and sanitization for contact form submissions.
Protects the generated notification email against HTML injection.
"""

import html
import re
from typing import Any

from email_validator import EmailNotValidError, validate_email as check_email_syntax
from fastapi import HTTPException, status

from src.shared.contact.schemas import ContactSubmission, SanitizedContact
from src.shared.email.templates import get_service_label


# Maximum lengths for different input types
MAX_SANITIZED_LENGTH = 10000
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_MESSAGE_LENGTH = 10
MAX_MESSAGE_LENGTH = 5000
MAX_BUSINESS_NAME_LENGTH = 100
PHONE_DIGITS = 10

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _as_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def _single_line(value: Any) -> str:
    """Collapse CR/LF runs to a space for values that end up in email headers."""
    return LINE_BREAKS.sub(" ", _as_text(value)).strip()


def sanitize_input(text: Any, max_length: int = MAX_SANITIZED_LENGTH) -> str:
    """
    Sanitize text input to prevent HTML injection.

    Args:
        text: Input value (non-strings sanitize to an empty string)
        max_length: Maximum length of the trimmed text before escaping

    Returns:
        Trimmed text truncated to max_length, then HTML-escaped
    """
    if not isinstance(text, str):
        return ""
    return html.escape(text.strip()[:max_length], quote=True)


def phone_digits(value: str) -> str:
    return re.sub(r'\D', '', value or "")


def format_phone_number(value: str) -> str:
    """Format a phone number to US standard (XXX) XXX-XXXX."""
    digits = phone_digits(value)[:PHONE_DIGITS]

    if not digits:
        return ""
    if len(digits) <= 3:
        return f"({digits}"
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def is_valid_phone_number(value: str) -> bool:
    return len(phone_digits(value)) == PHONE_DIGITS


def is_valid_email(email: str) -> bool:
    """Check email against the format regex and the email-validator library."""
    if not EMAIL_PATTERN.match(email):
        return False
    try:
        check_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_submission(submission: ContactSubmission) -> SanitizedContact:
    """
    Validate a contact submission and return sanitized values for the email.

    Lengths are measured on the trimmed text; the returned values are escaped.

    Raises:
        HTTPException (400) describing the first failed check
    """
    name = _single_line(submission.name)
    business_name = _single_line(submission.business_name)
    phone = _as_text(submission.phone)
    email = _as_text(submission.email)
    service = _as_text(submission.service)
    message = _as_text(submission.message)

    if not name or not phone or not email or not service or not message:
        raise _bad_request("Missing required fields")

    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        raise _bad_request(
            f"Name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters"
        )

    if len(message) < MIN_MESSAGE_LENGTH or len(message) > MAX_MESSAGE_LENGTH:
        raise _bad_request(
            f"Message must be between {MIN_MESSAGE_LENGTH} and {MAX_MESSAGE_LENGTH} characters"
        )

    if len(business_name) > MAX_BUSINESS_NAME_LENGTH:
        raise _bad_request(
            f"Business name must be less than {MAX_BUSINESS_NAME_LENGTH} characters"
        )

    if not is_valid_email(email):
        raise _bad_request("Please enter a valid email address")

    if not is_valid_phone_number(phone):
        raise _bad_request("Please enter a valid 10-digit phone number")

    return SanitizedContact(
        name=sanitize_input(name),
        business_name=sanitize_input(business_name),
        email=sanitize_input(email),
        phone=sanitize_input(phone),
        phone_display=format_phone_number(phone),
        service=sanitize_input(service),
        service_label=get_service_label(service),
        message=sanitize_input(message),
    )
