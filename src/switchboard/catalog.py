"""Tool catalog: the static description served to MCP discovery queries."""

from __future__ import annotations

from typing import Any, Final

import mcp.types as types

from switchboard.backends.base import BACKEND_SPECS, BackendId

GENERATE_TEXT: Final[str] = "generate_text"
LIST_MODELS: Final[str] = "list_models"
CHAT_CONVERSATION: Final[str] = "chat_conversation"

_PROVIDER_NAMES = [b.value for b in BackendId]
_PROVIDER_LABELS = ", ".join(BACKEND_SPECS[b].label for b in BackendId)


def _generation_options() -> dict[str, Any]:
    """Properties shared by both generation tools."""
    return {
        "provider": {
            "type": "string",
            "description": f"AI provider to use ({', '.join(_PROVIDER_NAMES)})",
            "enum": list(_PROVIDER_NAMES),
        },
        "model": {
            "type": "string",
            "description": "Specific model to use (optional, will use provider default)",
        },
        "max_tokens": {
            "type": "number",
            "description": "Maximum tokens to generate (default: 1024)",
            "default": 1024,
        },
        "temperature": {
            "type": "number",
            "description": "Temperature for text generation (0.0-2.0, default: 0.7)",
            "default": 0.7,
            "minimum": 0.0,
            "maximum": 2.0,
        },
    }


TOOL_DEFINITIONS: Final[tuple[dict[str, Any], ...]] = (
    {
        "name": GENERATE_TEXT,
        "description": (
            f"Generate text using AI models from various providers ({_PROVIDER_LABELS})"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "prompt": {
                    "type": "string",
                    "description": "The prompt to send to the AI model",
                },
                **_generation_options(),
            },
            "required": ["prompt"],
        },
    },
    {
        "name": LIST_MODELS,
        "description": "List all available AI models from configured providers",
        "inputSchema": {
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        },
    },
    {
        "name": CHAT_CONVERSATION,
        "description": "Have a multi-turn conversation with AI models",
        "inputSchema": {
            "type": "object",
            "properties": {
                "messages": {
                    "type": "array",
                    "description": "Array of chat messages with role and content",
                    "items": {
                        "type": "object",
                        "properties": {
                            "role": {
                                "type": "string",
                                "enum": ["system", "user", "assistant"],
                            },
                            "content": {"type": "string"},
                        },
                        "required": ["role", "content"],
                    },
                },
                **_generation_options(),
            },
            "required": ["messages"],
        },
    },
)

TOOL_NAMES: Final[frozenset[str]] = frozenset(t["name"] for t in TOOL_DEFINITIONS)


def list_tools() -> list[types.Tool]:
    """Return the catalog as MCP Tool objects, in declaration order."""
    return [types.Tool.model_validate(definition) for definition in TOOL_DEFINITIONS]
