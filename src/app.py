"""Contact Service - FastAPI server for the website contact form."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import Settings
from src.shared.captcha.verification import CaptchaVerifier
from src.shared.contact.rate_limiting import FixedWindowRateLimiter
from src.shared.contact.routes import GENERIC_ERROR_MESSAGE, router as contact_router
from src.shared.cors import cors_headers


def create_app(
    settings: Optional[Settings] = None,
    rate_limiter: Optional[FixedWindowRateLimiter] = None,
    captcha_verifier: Optional[CaptchaVerifier] = None,
) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Contact Service",
        description="Contact form endpoint with spam protection and email delivery",
        version="0.1.0"
    )
    app.state.settings = settings
    if rate_limiter is None:
        rate_limiter = FixedWindowRateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.state.rate_limiter = rate_limiter
    if captcha_verifier is None:
        captcha_verifier = CaptchaVerifier(
            settings.captcha_provider,
            settings.captcha_secret_key,
        )
    app.state.captcha_verifier = captcha_verifier

    # Include contact routes
    app.include_router(contact_router)

    # Global exception handlers to ensure CORS headers are always added
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors as {"error": ...} with CORS headers."""
        headers = cors_headers(request)
        if exc.headers:
            headers.update(exc.headers)

        if exc.status_code == 405:
            detail = "Method not allowed"
        elif isinstance(exc.detail, str):
            detail = exc.detail
        else:
            detail = str(exc.detail)

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": detail},
            headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Body could not be parsed into a submission."""
        logging.warning(f"Rejected malformed request body: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body"},
            headers=cors_headers(request)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Log unexpected failures server-side; never echo them to the caller."""
        logging.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": GENERIC_ERROR_MESSAGE},
            headers=cors_headers(request)
        )

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.api_port)
