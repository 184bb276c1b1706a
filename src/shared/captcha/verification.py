"""
CAPTCHA token verification against hCaptcha or Google reCAPTCHA.

Verification fails closed: a missing secret, a network error, a non-200 reply
or an unparseable body are all reported as a failed verification.
"""

import logging
from typing import Optional

import requests

VERIFY_URLS = {
    "hcaptcha": "https://hcaptcha.com/siteverify",
    "recaptcha": "https://www.google.com/recaptcha/api/siteverify",
}


class CaptchaVerifier:
    """
    Verifies client CAPTCHA tokens with the provider's siteverify API.

    Usage:
        verifier = CaptchaVerifier("hcaptcha", secret_key)
        is_valid = verifier.verify(token, remote_ip="203.0.113.7")
    """

    def __init__(
        self,
        provider: str,
        secret_key: Optional[str],
        verify_url: Optional[str] = None,
        timeout: float = 10,
    ):
        if verify_url is None and provider not in VERIFY_URLS:
            raise ValueError(f"Unsupported CAPTCHA provider: {provider}")
        self.provider = provider
        self.secret_key = secret_key
        self.verify_url = verify_url or VERIFY_URLS[provider]
        self.timeout = timeout

        if not self.secret_key:
            logging.warning(f"{provider} secret key is not set. CAPTCHA verification will fail!")

    def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        """
        Verify a CAPTCHA token.

        Args:
            token: The response token from the frontend widget
            remote_ip: Optional client IP address forwarded to the provider

        Returns:
            True only if the provider reports success
        """
        if not token:
            logging.warning("No CAPTCHA token provided")
            return False

        if not self.secret_key:
            logging.error(f"{self.provider} secret key not configured")
            return False

        payload = {
            "secret": self.secret_key,
            "response": token,
        }
        if remote_ip and remote_ip != "unknown":
            payload["remoteip"] = remote_ip

        try:
            response = requests.post(self.verify_url, data=payload, timeout=self.timeout)

            if response.status_code != 200:
                logging.error(f"{self.provider} API returned status {response.status_code}")
                return False

            result = response.json()
        except requests.exceptions.Timeout:
            logging.error(f"{self.provider} verification timeout")
            return False
        except requests.exceptions.RequestException as e:
            logging.error(f"{self.provider} verification network error: {str(e)}")
            return False
        except ValueError as e:
            logging.error(f"{self.provider} returned invalid JSON: {str(e)}")
            return False

        if isinstance(result, dict) and result.get("success") is True:
            return True

        error_codes = result.get("error-codes", []) if isinstance(result, dict) else []
        logging.warning(f"{self.provider} verification failed: {error_codes}")
        return False
