"""Service configuration loaded from environment variables."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file (for local development)
load_dotenv()


def _int_env(key: str, default: int) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except (TypeError, ValueError):
        return default


class Settings(BaseModel):
    """Configuration for the contact email service."""
    hostname: str = "kirknetllc.com"

    # Email delivery
    email_provider: str = "mailjet"  # 'mailjet' or 'smtp'
    mailjet_api_key: Optional[str] = None
    mailjet_secret_key: Optional[str] = None
    from_email: str = "noreply@kirknetllc.com"
    from_name: str = "Kirknet Message"
    to_email: str = "contact@kirknetllc.com"
    to_name: str = "Kirknet LLC"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None

    # Bot verification
    captcha_provider: str = "hcaptcha"  # 'hcaptcha' or 'recaptcha'
    captcha_secret_key: Optional[str] = None

    # Rate limiting: 3 requests per 5 minutes per IP
    rate_limit_max_requests: int = 3
    rate_limit_window_seconds: int = 300

    api_port: int = 3001

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        captcha_provider = os.environ.get("CAPTCHA_PROVIDER", "hcaptcha").lower()
        if captcha_provider == "recaptcha":
            captcha_secret = os.environ.get("RECAPTCHA_SECRET_KEY")
        else:
            captcha_secret = os.environ.get("HCAPTCHA_SECRET_KEY")

        return cls(
            hostname=os.environ.get("SITE_HOSTNAME", "kirknetllc.com"),
            email_provider=os.environ.get("EMAIL_PROVIDER", "mailjet").lower(),
            mailjet_api_key=os.environ.get("MAILJET_API_KEY"),
            mailjet_secret_key=os.environ.get("MAILJET_SECRET_KEY"),
            from_email=os.environ.get("MAILJET_FROM_EMAIL", "noreply@kirknetllc.com"),
            from_name=os.environ.get("MAILJET_FROM_NAME", "Kirknet Message"),
            to_email=os.environ.get("MAILJET_TO_EMAIL", "contact@kirknetllc.com"),
            to_name=os.environ.get("MAILJET_TO_NAME", "Kirknet LLC"),
            smtp_host=os.environ.get("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=_int_env("SMTP_PORT", 587),
            smtp_user=os.environ.get("SMTP_USER"),
            smtp_password=os.environ.get("SMTP_PASSWORD"),
            captcha_provider=captcha_provider,
            captcha_secret_key=captcha_secret,
            rate_limit_max_requests=_int_env("RATE_LIMIT_MAX_REQUESTS", 3),
            rate_limit_window_seconds=_int_env("RATE_LIMIT_WINDOW_SECONDS", 300),
            api_port=_int_env("API_PORT", 3001),
        )
