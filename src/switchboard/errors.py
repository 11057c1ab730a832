"""Exception hierarchy and failure rendering for Switchboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class SwitchboardError(Exception):
    """Base exception for all Switchboard errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(SwitchboardError):
    """Configuration validation or resolution failed."""


class InputError(SwitchboardError):
    """Tool arguments were missing or malformed."""


class BackendError(SwitchboardError):
    """An upstream backend call failed.

    Backends attach the HTTP status (when one exists) so the dispatcher can
    classify failures without substring matching.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.provider = provider


class AuthenticationError(BackendError):
    """Credential rejected by the backend (HTTP 401/403)."""


class RateLimitError(BackendError):
    """Rate limit exceeded (HTTP 429)."""


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, skipping cycles."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def describe_failure(exc: BaseException, provider: str, *, fallback: str) -> str:
    """Render a backend failure as a message for the caller.

    Only the two conditions an operator can act on are singled out; every
    other failure is surfaced with its own message.

    Args:
        exc: The error raised while calling the backend.
        provider: Id of the backend that was called.
        fallback: Message to use when the error carries no text of its own.

    Returns:
        A human-readable message (without the ``Error:`` prefix).
    """
    status_code = extract_status_code(exc)
    if status_code == 401:
        return f"Authentication failed for {provider}. Please check your API key."
    if status_code == 429:
        return f"Rate limit exceeded for {provider}. Please try again later."
    message = str(exc).strip()
    return message or fallback
