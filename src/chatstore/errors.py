"""Kind-tagged errors raised by the store.

Every error code has the form ``<type>:<surface>``, for example
``bad_request:database``. The type decides the HTTP status code; the surface
decides whether details may be shown to the caller or only logged.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal, get_args

logger = logging.getLogger(__name__)

ErrorType = Literal[
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "rate_limit",
    "offline",
]

Surface = Literal[
    "chat",
    "auth",
    "api",
    "stream",
    "database",
    "history",
    "vote",
    "document",
    "suggestions",
]

ErrorVisibility = Literal["response", "log", "none"]

ERROR_TYPES: frozenset[str] = frozenset(get_args(ErrorType))
SURFACES: frozenset[str] = frozenset(get_args(Surface))

VISIBILITY_BY_SURFACE: dict[str, ErrorVisibility] = {
    "database": "log",
    "chat": "response",
    "auth": "response",
    "stream": "response",
    "api": "response",
    "history": "response",
    "vote": "response",
    "document": "response",
    "suggestions": "response",
}

STATUS_BY_TYPE: dict[str, int] = {
    "bad_request": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "rate_limit": 429,
    "offline": 503,
}

GENERIC_MESSAGE = "Something went wrong. Please try again later."

_MESSAGES: dict[str, str] = {
    "bad_request:api": "The request couldn't be processed. Please check your input and try again.",
    "unauthorized:auth": "You need to sign in before continuing.",
    "forbidden:auth": "Your account does not have access to this feature.",
    "rate_limit:chat": "You have exceeded your maximum number of messages for the day. Please try again later.",
    "not_found:chat": "The requested chat was not found. Please check the chat ID and try again.",
    "forbidden:chat": "This chat belongs to another user. Please check the chat ID and try again.",
    "unauthorized:chat": "You need to sign in to view this chat. Please sign in and try again.",
    "offline:chat": "We're having trouble sending your message. Please check your internet connection and try again.",
    "not_found:document": "The requested document was not found. Please check the document ID and try again.",
    "forbidden:document": "This document belongs to another user. Please check the document ID and try again.",
    "unauthorized:document": "You need to sign in to view this document. Please sign in and try again.",
    "bad_request:document": "The request to create or update the document was invalid. Please check your input and try again.",
}


def message_for_code(code: str) -> str:
    """Return the user-facing message for an error code."""
    if code.endswith(":database"):
        return "An error occurred while executing a database query."
    return _MESSAGES.get(code, GENERIC_MESSAGE)


def status_for_type(error_type: str) -> int:
    return STATUS_BY_TYPE.get(error_type, 500)


class StoreError(Exception):
    """Failure tagged with an error code such as ``bad_request:database``.

    Attributes:
        code: Full ``<type>:<surface>`` code.
        type: Error type, decides ``status_code``.
        surface: Where the error happened, decides visibility.
        cause: Human-readable description of what failed.
        message: User-facing message for the code.
        status_code: HTTP status code for the type.
    """

    def __init__(self, code: str, cause: str | None = None):
        error_type, sep, surface = code.partition(":")
        if not sep or error_type not in ERROR_TYPES or surface not in SURFACES:
            raise ValueError(f"Invalid error code: {code!r}")

        self.code = code
        self.type = error_type
        self.surface = surface
        self.cause = cause
        self.message = message_for_code(code)
        self.status_code = status_for_type(error_type)
        super().__init__(cause or self.message)

    @property
    def visibility(self) -> ErrorVisibility:
        return VISIBILITY_BY_SURFACE[self.surface]

    def to_response(self) -> tuple[int, dict[str, Any]]:
        """Build ``(status_code, payload)`` for an API response.

        Log-only surfaces never leak the code or cause to the caller.
        """
        if self.visibility == "log":
            logger.error(
                "store_error",
                extra={
                    "code": self.code,
                    "error_message": self.message,
                    "cause": self.cause,
                },
            )
            return self.status_code, {"code": "", "message": GENERIC_MESSAGE}

        return self.status_code, {
            "code": self.code,
            "message": self.message,
            "cause": self.cause,
        }

    def __repr__(self) -> str:
        return f"StoreError(code={self.code!r}, cause={self.cause!r})"


@contextmanager
def database_errors(cause: str) -> Iterator[None]:
    """Rethrow any failure inside the block as ``bad_request:database``.

    A StoreError raised inside the block (e.g. ``not_found:database`` for a
    missing pagination cursor) propagates unchanged.

    Usage:
        with database_errors("Failed to save chat"):
            async with db.session() as session:
                ...
    """
    try:
        yield
    except StoreError:
        raise
    except Exception as e:
        logger.error(
            "database_operation_failed",
            exc_info=True,
            extra={"cause": cause, "error_type": type(e).__name__},
        )
        raise StoreError("bad_request:database", cause) from e
