"""MCP transport wiring: discovery and tool calls over stdio or streamable HTTP.

Uses the SDK's low-level ``Server`` so the advertised schemas are exactly the
catalog's. SDK-side input validation is turned off; the dispatcher reports
bad arguments itself, as text.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import TYPE_CHECKING, Any

from mcp.server.lowlevel import Server
import mcp.types as types

from switchboard.catalog import list_tools
from switchboard.dispatcher import Dispatcher
from switchboard.request import ToolRequest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
    from starlette.applications import Starlette

    from switchboard.config import Settings
    from switchboard.registry import BackendRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "enhanced-ai-assistant"
SERVER_VERSION = "2.0.0"
SERVER_INSTRUCTIONS = "Enhanced AI assistant with multiple model support"
HTTP_PATH = "/mcp"


class SwitchboardServer:
    """Binds a Dispatcher to an MCP server and runs it on a transport."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher
        self.server = self._build()

    async def list_tools(self) -> list[types.Tool]:
        """Answer the discovery query with the static catalog."""
        return list_tools()

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        """Dispatch one tool call; the result is always a single text block."""
        response = await self._dispatcher.handle_tool_call(
            ToolRequest(tool_name=name, arguments=arguments or {})
        )
        return response.to_content()

    def _build(self) -> Server:
        server: Server = Server(
            SERVER_NAME, version=SERVER_VERSION, instructions=SERVER_INSTRUCTIONS
        )
        server.list_tools()(self.list_tools)
        server.call_tool(validate_input=False)(self.call_tool)
        return server

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )

    def http_app(self) -> Starlette:
        """Build a Starlette app exposing the server at ``HTTP_PATH``."""
        from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
        from starlette.applications import Starlette
        from starlette.routing import Route

        session_manager = StreamableHTTPSessionManager(app=self.server, stateless=True)

        @contextlib.asynccontextmanager
        async def lifespan(_app: Starlette) -> AsyncIterator[None]:
            async with session_manager.run():
                yield

        # An ASGI object (not a function) so Route passes requests through raw.
        endpoint = _SessionEndpoint(session_manager)
        return Starlette(
            routes=[Route(HTTP_PATH, endpoint=endpoint)], lifespan=lifespan
        )

    async def run_http(self, host: str, port: int) -> None:
        """Serve streamable HTTP with uvicorn until shut down."""
        import uvicorn

        config = uvicorn.Config(
            self.http_app(),
            host=host,
            port=port,
            log_level="warning",
        )
        await uvicorn.Server(config).serve()

    async def run(self, settings: Settings) -> None:
        """Run on the transport named in *settings*."""
        if settings.transport == "http":
            logger.info(
                "Listening on http://%s:%s%s",
                settings.http_host,
                settings.http_port,
                HTTP_PATH,
            )
            await self.run_http(settings.http_host, settings.http_port)
        else:
            await self.run_stdio()


class _SessionEndpoint:
    """ASGI adapter handing each request to the streamable HTTP session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self._session_manager = session_manager

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        await self._session_manager.handle_request(scope, receive, send)


def _log_unhandled(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Log exceptions nobody awaited instead of letting them pass silently."""
    _ = loop
    logger.error(
        "Unhandled exception in event loop: %s",
        context.get("message", "unknown error"),
        exc_info=context.get("exception"),
    )


async def serve(settings: Settings, registry: BackendRegistry) -> None:
    """Run the MCP server until the transport closes or SIGTERM arrives.

    Backend clients are closed on the way out.
    """
    loop = asyncio.get_running_loop()
    loop.set_exception_handler(_log_unhandled)

    app = SwitchboardServer(Dispatcher(registry))
    stop = asyncio.Event()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGTERM, stop.set)

    logger.info(
        "%s %s running (%s transport)", SERVER_NAME, SERVER_VERSION, settings.transport
    )
    logger.info(
        "Available providers: %s",
        ", ".join(b.value for b in registry.list_available()) or "none",
    )

    transport_task = asyncio.create_task(app.run(settings))
    stop_task = asyncio.create_task(stop.wait())
    try:
        done, _ = await asyncio.wait(
            {transport_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if stop_task in done:
            logger.info("Shutting down MCP server...")
            transport_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await transport_task
        else:
            transport_task.result()
    finally:
        stop_task.cancel()
        if not transport_task.done():
            transport_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await transport_task
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGTERM)
        await registry.aclose()
