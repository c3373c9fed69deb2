"""
Error taxonomy for XMS calls.

Every failure is terminal: the library performs no retry, backoff, or
recovery. Callers decide whether a given category is worth retrying.
"""

from __future__ import annotations


class XmsError(Exception):
    """Base exception for all XMS client errors."""


class TransportError(XmsError):
    """The HTTP exchange could not complete (DNS, reset, timeout, closed client)."""


class ApiError(XmsError):
    """
    The server rejected the request as malformed or forbidden (400/403).

    Attributes:
        code: Stable machine-readable error token, e.g. ``'syntax_invalid_json'``.
        text: Human-readable description from the server.
    """

    def __init__(self, code: str, text: str) -> None:
        super().__init__(f"{code}: {text}")
        self.code = code
        self.text = text


class NotFoundError(XmsError):
    """The requested resource does not exist (404)."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No resource found at {url}")
        self.url = url


class UnauthorizedError(XmsError):
    """
    Authentication was rejected (401).

    The raw token is kept on the instance for diagnosis but only a masked
    form ever appears in the exception message.
    """

    def __init__(self, service_plan_id: str, token: str) -> None:
        super().__init__(
            f"Unauthorized for service plan '{service_plan_id}' "
            f"with token '{mask_token(token)}'"
        )
        self.service_plan_id = service_plan_id
        self.token = token


class UnexpectedResponseError(XmsError):
    """The server answered with a status outside the known set."""

    def __init__(self, message: str, raw_body: bytes) -> None:
        super().__init__(message)
        self.message = message
        self.raw_body = raw_body


class InvalidArgumentError(XmsError, ValueError):
    """A creation object of an unsupported variant was supplied."""


def mask_token(token: str) -> str:
    """
    Return ``token`` with everything but its first and last two characters hidden.

    Tokens of six characters or fewer are hidden entirely.
    """
    if len(token) <= 6:
        return "*" * len(token)
    return f"{token[:2]}{'*' * (len(token) - 4)}{token[-2:]}"
