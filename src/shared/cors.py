"""CORS header helpers shared by the contact routes and the app exception handlers."""

from typing import Dict, Optional

from fastapi import Request

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def get_allowed_origin(request_origin: Optional[str], hostname: str) -> str:
    """
    Pick the Access-Control-Allow-Origin value for a request origin.

    No origin (server-side callers) gets '*'. Local development origins and
    origins on the configured hostname are echoed back. Anything else is
    pinned to https://{hostname}.
    """
    if not request_origin:
        return "*"

    if "localhost" in request_origin or "127.0.0.1" in request_origin:
        return request_origin

    if hostname and hostname in request_origin:
        return request_origin

    return f"https://{hostname}"


def cors_headers(request: Request, preflight: bool = False) -> Dict[str, str]:
    """Build the CORS headers mirrored onto every response."""
    settings = request.app.state.settings
    headers = {
        "Access-Control-Allow-Origin": get_allowed_origin(request.headers.get("origin"), settings.hostname),
        "Access-Control-Allow-Credentials": "true",
    }
    if preflight:
        headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
    return headers
