"""Contact routes for sending website inquiries to the company inbox."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from src.shared.contact.input_validation import validate_submission
from src.shared.contact.rate_limiting import get_client_ip
from src.shared.contact.schemas import ContactResponse, ContactSubmission
from src.shared.cors import cors_headers
from src.shared.email.email_utils import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    send_contact_email,
)

router = APIRouter(prefix="/api", tags=["contact"])

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request. Please try again later."


@router.options("/send-contact-email")
async def contact_preflight(request: Request):
    """Answer CORS preflight without touching the request body."""
    return Response(status_code=status.HTTP_200_OK, headers=cors_headers(request, preflight=True))


@router.post("/send-contact-email", response_model=ContactResponse, status_code=status.HTTP_200_OK)
async def submit_contact_form(submission: ContactSubmission, request: Request):
    """
    Submit a contact form inquiry.

    Checks run in order: honeypot, per-IP rate limit, CAPTCHA, input validation.
    The email is sent once with no retry; provider failures surface as a
    generic 500.
    """
    settings = request.app.state.settings
    rate_limiter = request.app.state.rate_limiter
    captcha_verifier = request.app.state.captcha_verifier
    client_ip = get_client_ip(request)

    # Honeypot filled: pretend it worked so bots get no signal
    if submission.honeypot:
        logging.warning(f"Honeypot triggered from IP: {client_ip}")
        return JSONResponse(content={"success": True}, headers=cors_headers(request))

    if not rate_limiter.check(client_ip):
        logging.warning(f"Rate limit exceeded from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(rate_limiter.retry_after(client_ip))},
        )

    token = submission.captcha_token
    if not token or not isinstance(token, str):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CAPTCHA verification required",
        )

    captcha_valid = await run_in_threadpool(captcha_verifier.verify, token, client_ip)
    if not captcha_valid:
        logging.warning(f"Failed CAPTCHA verification from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CAPTCHA verification failed. Please try again.",
        )

    contact = validate_submission(submission)

    try:
        await run_in_threadpool(send_contact_email, contact, settings)
    except EmailNotConfiguredError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Email service not configured",
        )
    except EmailDeliveryError as e:
        logging.error(f"Failed to send contact form email: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_ERROR_MESSAGE,
        )

    logging.info(f"Contact form email sent successfully from IP: {client_ip}")
    return JSONResponse(content={"success": True}, headers=cors_headers(request))
