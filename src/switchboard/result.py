"""Uniform tool response shape and the fixed texts it carries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import mcp.types as types

from switchboard.backends.base import BACKEND_SPECS, BackendId

if TYPE_CHECKING:
    from collections.abc import Sequence

    from switchboard.registry import BackendRegistry

NO_RESPONSE_TEXT = "No response generated"


@dataclass(frozen=True)
class ToolResponse:
    """The single text payload returned for every tool call.

    Success and failure share this shape; callers tell them apart by reading
    the text.
    """

    text: str

    @classmethod
    def error(cls, message: str) -> ToolResponse:
        return cls(f"Error: {message}")

    def to_content(self) -> list[types.TextContent]:
        """Render as MCP content blocks."""
        return [types.TextContent(type="text", text=self.text)]


def no_backends_text() -> str:
    """Explain which credentials would enable a backend."""
    lines = [
        "No AI providers configured. Please set one of the following "
        "environment variables:"
    ]
    for backend_id in BackendId:
        spec = BACKEND_SPECS[backend_id]
        lines.append(f"- {spec.credential_env} (for {spec.label})")
    lines.append("")
    lines.append("Then restart the server.")
    return "\n".join(lines)


def render_model_list(
    registry: BackendRegistry, backend_ids: Sequence[BackendId]
) -> str:
    """List every model of each backend, marking its default."""
    out = "Available AI Models:\n\n"
    for backend_id in backend_ids:
        default = registry.default_model_for(backend_id)
        out += f"**{backend_id.value.upper()}:**\n"
        for model in registry.models_for(backend_id):
            suffix = " (default)" if model == default else ""
            out += f"- {model}{suffix}\n"
        out += "\n"
    return out
