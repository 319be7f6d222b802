"""
MCP stdio server exposing the transcript tools.

Registers every ToolDispatcher tool with the MCP runtime and runs the
JSON-RPC loop over stdin/stdout. Logging goes to stderr.

Exit codes:
    0  server stopped normally
    1  configuration invalid (e.g. FIREFLIES_API_KEY missing) or fatal error
"""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, List

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from services.tool_dispatcher import ToolDispatcher
from shared_utils.config_loader import load_settings_or_none
from shared_utils.constants import LogScope
from shared_utils.di_container import get_di_container
from shared_utils.error_handler import ToolError, as_tool_error
from shared_utils.logging_utils import configure_logging, get_scoped_logger

logger = get_scoped_logger(LogScope.MCP)

SERVER_NAME = "fireflies-tools"


def to_mcp_error(exc: Exception) -> McpError:
    """Map any failure onto a JSON-RPC error carrying the ToolError kind."""
    error = as_tool_error(exc)
    return McpError(
        types.ErrorData(
            code=error.rpc_code,
            message=error.message,
            data={"kind": error.kind},
        )
    )


def build_server(dispatcher: ToolDispatcher, version: str = "1.0.0") -> Server:
    """Create an MCP server whose tools delegate to ``dispatcher``."""
    server = Server(SERVER_NAME, version=version)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in dispatcher.list_tools()
        ]

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        arguments: Dict[str, Any] = request.params.arguments or {}
        try:
            # The dispatcher is synchronous; keep the event loop free.
            result = await anyio.to_thread.run_sync(dispatcher.invoke, name, arguments)
        except ToolError as exc:
            logger.warning("mcp_call_rejected", tool=name, kind=exc.kind)
            raise to_mcp_error(exc) from exc
        except Exception as exc:
            logger.error("mcp_call_failed", tool=name, error=str(exc))
            raise to_mcp_error(exc) from exc

        return types.ServerResult(
            types.CallToolResult(
                content=[types.TextContent(type="text", text=block) for block in result.content],
                isError=False,
            )
        )

    # Registered directly: the call_tool decorator turns raised errors into
    # isError results, dropping the kind and the JSON-RPC code.
    server.request_handlers[types.CallToolRequest] = handle_call_tool

    return server


async def _serve(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> int:
    """Entrypoint - validate configuration, build deps, serve over stdio."""
    configure_logging(
        environment=os.environ.get("ENVIRONMENT", "development").lower(),
        level=os.environ.get("LOG_LEVEL", "INFO"),
    )

    settings = load_settings_or_none()
    if settings is None:
        print("Error: FIREFLIES_API_KEY environment variable is required", file=sys.stderr)
        return 1

    try:
        dispatcher = get_di_container().get_tool_dispatcher()
        server = build_server(dispatcher, version=settings.app_version)
        logger.info("mcp_server_started", tools=len(dispatcher.list_tools()))
        anyio.run(_serve, server)
    except KeyboardInterrupt:
        logger.info("mcp_server_interrupted")
    except Exception as exc:
        logger.error("mcp_server_failed", error=str(exc))
        return 1

    logger.info("mcp_server_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
