"""FastAPI authentication dependency."""

import secrets

from fastapi import HTTPException, Request


async def verify_api_key(request: Request) -> None:
    """Check the X-API-Key header against APP_API_KEY.

    A missing header is rejected like a wrong one (401), not as a validation
    error, so clients cannot probe which routes exist.

    Raises:
        HTTPException: 401 for a missing or wrong key, 500 if APP_API_KEY is not configured.
    """
    try:
        expected_key = request.app.state.config.get_string_val("APP_API_KEY")
    except ValueError:
        request.app.state.logging.error("APP_API_KEY is not set; rejecting %s %s.", request.method, request.url.path)
        raise HTTPException(status_code=500, detail="API key is not configured on the server.")

    provided_key = request.headers.get("X-API-Key", "")
    if not provided_key or not secrets.compare_digest(provided_key.encode("utf-8"), expected_key.encode("utf-8")):
        request.app.state.logging.warning("Rejected %s %s: invalid API key.", request.method, request.url.path)
        raise HTTPException(status_code=401, detail="Invalid or missing API key.")
