"""Configuration: settings resolved once at startup, then frozen.

Credentials are read from the variables their SDKs already use
(``HF_TOKEN``, ``OPENAI_API_KEY``, ``ANTHROPIC_API_KEY``); every other
setting uses the ``SWITCHBOARD_`` prefix. A ``.env`` file in the working
directory is loaded first and never overrides variables already set.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from switchboard.backends.base import BACKEND_SPECS, BackendId
from switchboard.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "SWITCHBOARD_"
DEFAULT_HF_BASE_URL = "https://router.huggingface.co/v1"

# Settings field holding each backend's credential.
CREDENTIAL_FIELDS: dict[BackendId, str] = {
    BackendId.HUGGINGFACE: "hf_token",
    BackendId.OPENAI: "openai_api_key",
    BackendId.ANTHROPIC: "anthropic_api_key",
}

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    """Pydantic schema for configuration validation and defaults."""

    model_config = {"frozen": True, "extra": "ignore"}

    # Credentials: presence is the only thing that enables a backend.
    hf_token: SecretStr | None = None
    openai_api_key: SecretStr | None = None
    anthropic_api_key: SecretStr | None = None

    # Endpoint overrides
    hf_base_url: str = DEFAULT_HF_BASE_URL
    openai_base_url: str | None = None
    anthropic_base_url: str | None = None

    # Transport
    transport: Literal["stdio", "http"] = "stdio"
    http_host: str = Field(default="127.0.0.1", min_length=1)
    http_port: int = Field(default=3141, ge=1, le=65535)

    log_level: str = "INFO"

    @field_validator("hf_token", "openai_api_key", "anthropic_api_key", mode="before")
    @classmethod
    def normalize_credential(cls, v: Any) -> Any:
        """Trim whitespace and treat empty values as absent."""
        if v is None:
            return None
        if isinstance(v, SecretStr):
            s = v.get_secret_value().strip()
            return SecretStr(s) if s else None
        if isinstance(v, str):
            s = v.strip()
            return SecretStr(s) if s else None
        return v

    @field_validator("hf_base_url", mode="before")
    @classmethod
    def default_hf_base_url(cls, v: Any) -> Any:
        """Fall back to the public router when the override is blank."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_HF_BASE_URL
        return v.strip() if isinstance(v, str) else v

    @field_validator("openai_base_url", "anthropic_base_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, v: Any) -> Any:
        """Let the SDK pick its own endpoint when the override is blank."""
        if isinstance(v, str):
            s = v.strip()
            return s or None
        return v

    @field_validator("transport", mode="before")
    @classmethod
    def normalize_transport(cls, v: Any) -> Any:
        """Accept any casing for the transport name."""
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Upper-case the level name and reject unknown ones."""
        if not isinstance(v, str):
            return v
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    def credential_for(self, backend: BackendId) -> str | None:
        """Return the raw credential for *backend*, or None when unset."""
        secret: SecretStr | None = getattr(self, CREDENTIAL_FIELDS[backend])
        return secret.get_secret_value() if secret is not None else None

    def redacted(self) -> dict[str, Any]:
        """Redacted dict for structured logging (never prints secrets)."""
        out: dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if name in CREDENTIAL_FIELDS.values():
                out[name] = "***redacted***" if value is not None else None
            else:
                out[name] = value
        return out


def field_spec_hint(field: str) -> str:
    """Return a compact hint for setting a config field via the environment."""
    for backend, name in CREDENTIAL_FIELDS.items():
        if name == field:
            return f"Set {BACKEND_SPECS[backend].credential_env}."
    return f"Set {ENV_PREFIX}{field.upper()}."


def load_env() -> dict[str, Any]:
    """Load configuration values from ``os.environ``.

    Returns plain strings; coercion and validation happen in ``Settings``.
    """
    config: dict[str, Any] = {}
    for backend, field in CREDENTIAL_FIELDS.items():
        value = os.environ.get(BACKEND_SPECS[backend].credential_env)
        if value is not None:
            config[field] = value

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field = key[len(ENV_PREFIX) :].lower()
        if field in Settings.model_fields and field not in CREDENTIAL_FIELDS.values():
            config[field] = value
    return config


def _load_dotenv() -> None:
    """Load ``./.env`` without overriding variables already set."""
    from dotenv import find_dotenv, load_dotenv

    load_dotenv(find_dotenv(usecwd=True), override=False)


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    dotenv: bool = True,
) -> Settings:
    """Resolve settings from ``.env``, the environment, and explicit overrides.

    Args:
        overrides: Values that win over anything in the environment.
        dotenv: Whether to load a ``.env`` file first.

    Returns:
        Validated, immutable Settings.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    if dotenv:
        _load_dotenv()

    merged: dict[str, Any] = {**load_env(), **dict(overrides or {})}
    try:
        settings = Settings(**merged)
    except ValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "settings"
        raise ConfigurationError(
            f"Invalid configuration for {field}: {first['msg']}",
            hint=field_spec_hint(field),
        ) from e

    logger.debug("Resolved settings: %s", settings.redacted())
    return settings
