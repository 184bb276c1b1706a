"""Pydantic schemas for contact API."""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ContactSubmission(BaseModel):
    """
    Raw contact form submission.

    Fields are left untyped on purpose so the handler decides which check
    rejects a bad request (honeypot, rate limit, CAPTCHA, then validation).
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[Any] = None
    business_name: Optional[Any] = Field(default=None, alias="businessName")
    phone: Optional[Any] = None
    email: Optional[Any] = None
    service: Optional[Any] = None
    message: Optional[Any] = None
    captcha_token: Optional[Any] = Field(
        default=None,
        validation_alias=AliasChoices("captchaToken", "recaptchaToken", "captcha_token"),
    )
    honeypot: Optional[Any] = None


class SanitizedContact(BaseModel):
    """Validated submission with every free-text field trimmed and HTML-escaped."""
    name: str
    business_name: str = ""
    email: str
    phone: str
    phone_display: str
    service: str
    service_label: str
    message: str


class ContactResponse(BaseModel):
    """Schema for contact form response."""
    success: bool
