"""
Classification of raw XMS responses into success or a typed error.

The mapping is total over the status-code domain:

    200, 201  → body returned unchanged
    400, 403  → ApiError (code/text from the error body)
    404       → NotFoundError
    401       → UnauthorizedError
    other     → UnexpectedResponseError
"""

from __future__ import annotations

from . import deserialize
from .config import (
    API_ERROR_STATUSES,
    NOT_FOUND_STATUS,
    SUCCESS_STATUSES,
    UNAUTHORIZED_STATUS,
)
from .errors import ApiError, NotFoundError, UnauthorizedError, UnexpectedResponseError


def classify_response(
    status: int,
    body: bytes,
    url: str,
    service_plan_id: str,
    token: str,
) -> bytes:
    """
    Return the body of a successful response, raise for anything else.

    Args:
        status: HTTP status code.
        body: Raw response body.
        url: URL the request was sent to (reported on 404).
        service_plan_id: Configured service plan (reported on 401).
        token: Configured token (reported on 401).

    Returns:
        ``body``, untouched, for status 200 or 201.

    Raises:
        ApiError: Status 400 or 403.
        NotFoundError: Status 404.
        UnauthorizedError: Status 401.
        UnexpectedResponseError: Any other status, or a 400/403 whose body
            is not a valid error object.
    """
    if status in SUCCESS_STATUSES:
        return body

    if status in API_ERROR_STATUSES:
        error_body = deserialize.error(body)
        raise ApiError(error_body.code, error_body.text)

    if status == NOT_FOUND_STATUS:
        raise NotFoundError(url)

    if status == UNAUTHORIZED_STATUS:
        raise UnauthorizedError(service_plan_id, token)

    raise UnexpectedResponseError(f"Unexpected HTTP status {status}", body)
