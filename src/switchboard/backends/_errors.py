"""Shared backend-side error helpers.

Backends map SDK exceptions into BackendError so the dispatcher sees one
error type with a stable ``status_code`` attribute.
"""

from __future__ import annotations

import asyncio

from switchboard.backends.base import BACKEND_SPECS, BackendId
from switchboard.errors import (
    AuthenticationError,
    BackendError,
    RateLimitError,
    extract_status_code,
)


def _auth_hint(provider: str, status_code: int | None) -> str | None:
    """Name the credential variable when the backend rejected it."""
    if status_code not in {401, 403}:
        return None
    try:
        env_var = BACKEND_SPECS[BackendId(provider)].credential_env
    except ValueError:
        env_var = "the API key"
    return f"Check credentials/permissions (try setting {env_var})."


def wrap_backend_error(
    exc: BaseException,
    *,
    provider: str,
    hint: str | None = None,
) -> BackendError:
    """Map backend SDK exceptions into BackendError.

    The SDK's own message is kept verbatim so callers see what the upstream
    service said.
    """
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    # Already wrapped: fill in missing context only.
    if isinstance(exc, BackendError):
        if exc.provider is None:
            exc.provider = provider
        if hint is not None and exc.hint is None:
            exc.hint = hint
        return exc

    status_code = extract_status_code(exc)

    err_cls: type[BackendError] = BackendError
    if status_code in {401, 403}:
        err_cls = AuthenticationError
    elif status_code == 429:
        err_cls = RateLimitError

    return err_cls(
        str(exc),
        hint=hint if hint is not None else _auth_hint(provider, status_code),
        status_code=status_code,
        provider=provider,
    )
