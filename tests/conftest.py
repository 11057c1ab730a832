"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, marker registration,
and automatic API test skipping. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

from tests.helpers import FakeBackend, make_registry

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================

_CREDENTIAL_VARS = ("HF_TOKEN", "OPENAI_API_KEY", "ANTHROPIC_API_KEY")


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_provider_env(request, monkeypatch):
    """Ensure a clean provider environment for each test.

    Clears credential and SWITCHBOARD_* variables to prevent test pollution.
    Opt-out: @pytest.mark.api
    """
    if "api" in request.node.keywords:
        return

    for key in list(os.environ.keys()):
        if key in _CREDENTIAL_VARS or key.startswith(
            ("SWITCHBOARD_", "OPENAI_", "ANTHROPIC_")
        ):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Pytest Hooks
# =============================================================================

API_TESTS_REASON = "API tests require ENABLE_API_TESTS=1"


def _api_tests_enabled() -> bool:
    return bool(os.getenv("ENABLE_API_TESTS"))


def pytest_collection_modifyitems(items):
    """Automatically skip API tests when not explicitly enabled."""
    if _api_tests_enabled():
        return
    skip_api = pytest.mark.skip(reason=API_TESTS_REASON)
    for item in items:
        if "api" in item.keywords:
            item.add_marker(skip_api)


def pytest_configure(config):
    config.addinivalue_line("markers", "allow_dotenv: let python-dotenv read .env")


# =============================================================================
# Doubles
# =============================================================================


@pytest.fixture
def hf_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def openai_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def anthropic_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def full_registry(hf_backend, openai_backend, anthropic_backend):
    """Registry with all three backends configured, each backed by a fake."""
    return make_registry(
        huggingface=hf_backend,
        openai=openai_backend,
        anthropic=anthropic_backend,
    )


# =============================================================================
# API Test Configuration
# =============================================================================

# Cheapest models per provider for real calls.
_OPENAI_TEST_MODEL = "gpt-4o-mini"
_ANTHROPIC_TEST_MODEL = "claude-3-5-haiku-20241022"


@pytest.fixture
def openai_api_key():
    """Return OPENAI_API_KEY or skip the test if unavailable."""
    key = os.getenv("OPENAI_API_KEY")
    if not key:
        pytest.skip("OPENAI_API_KEY not set")
    return key


@pytest.fixture
def openai_test_model():
    return _OPENAI_TEST_MODEL


@pytest.fixture
def anthropic_api_key():
    """Return ANTHROPIC_API_KEY or skip the test if unavailable."""
    key = os.getenv("ANTHROPIC_API_KEY")
    if not key:
        pytest.skip("ANTHROPIC_API_KEY not set")
    return key


@pytest.fixture
def anthropic_test_model():
    return _ANTHROPIC_TEST_MODEL
