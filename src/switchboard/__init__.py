"""Switchboard: an MCP server routing text generation to configured AI providers.

Public API:
    - Dispatcher: validates and routes one tool call to a backend
    - BackendRegistry: the backends whose credentials were present at startup
    - Settings / load_settings: configuration
    - SwitchboardServer / serve: MCP transport wiring
"""

from __future__ import annotations

import logging

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("switchboard-mcp")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("switchboard").addHandler(logging.NullHandler())

from switchboard.backends import BackendId, ChatRequest, ChatResponse  # noqa: E402
from switchboard.config import Settings, load_settings  # noqa: E402
from switchboard.dispatcher import Dispatcher  # noqa: E402
from switchboard.errors import (  # noqa: E402
    AuthenticationError,
    BackendError,
    ConfigurationError,
    InputError,
    RateLimitError,
    SwitchboardError,
)
from switchboard.registry import Backend, BackendRegistry  # noqa: E402
from switchboard.request import ToolRequest  # noqa: E402
from switchboard.result import ToolResponse  # noqa: E402
from switchboard.server import SwitchboardServer, serve  # noqa: E402

__all__ = [
    "AuthenticationError",
    "Backend",
    "BackendError",
    "BackendId",
    "BackendRegistry",
    "ChatRequest",
    "ChatResponse",
    "ConfigurationError",
    "Dispatcher",
    "InputError",
    "RateLimitError",
    "Settings",
    "SwitchboardError",
    "SwitchboardServer",
    "ToolRequest",
    "ToolResponse",
    "load_settings",
    "serve",
]
