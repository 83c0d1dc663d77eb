"""Azure DevOps MCP Server - Expose Azure DevOps to AI assistants over stdio."""
import sys
import asyncio
import logging
import traceback
from typing import Any, Callable

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from . import tools
from . import handlers
from .config import AZURE_DEVOPS_LOG_LEVEL, AZURE_DEVOPS_ORG_URL, validate_config
from .connection import AdoConnection, create_connection
from .validation import create_error_response, validate_arguments


# Configure logging to stderr; stdout carries the protocol
logging.basicConfig(
    level=AZURE_DEVOPS_LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr,
    force=True
)
logger = logging.getLogger("azdo-mcp")


# MCP Server instance
app = Server("azure-devops-mcp")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available MCP tools for Azure DevOps."""
    return tools.get_tools()


# ============================================================================
# Tool Dispatch
# ============================================================================

async def dispatch(
    name: str,
    arguments: Any,
    connection_factory: Callable[[], AdoConnection] = create_connection,
) -> CallToolResult:
    """Route a tool call to its handler with a fresh connection.

    Handler failures never escape: they come back as error-flagged results.
    """
    logger.info(f"Tool call: {name} with argument keys: {list(arguments or {})}")

    handler = handlers.get_handler(name)
    tool = tools.get_tool(name)
    if not handler or not tool:
        logger.warning(f"Unknown tool requested: {name}")
        return create_error_response(f"Unknown tool: {name}")

    invalid = validate_arguments(arguments, tool.inputSchema)
    if invalid:
        logger.warning(f"Rejected arguments for {name}: {invalid.content[0].text}")
        return invalid

    try:
        async with connection_factory() as connection:
            return await handler(arguments, connection)

    except httpx.RequestError as e:
        logger.error(f"Request error during {name} call:")
        logger.error(f"  Error type: {type(e).__name__}")
        logger.error(f"  Error message: {str(e)}")
        return create_error_response(f"Error executing {name}: {str(e)}")

    except Exception as e:
        logger.error(f"Unexpected error during {name} call:")
        logger.error(f"  Error type: {type(e).__name__}")
        logger.error(f"  Error message: {str(e)}")
        logger.error(f"  Traceback:\n{traceback.format_exc()}")
        return create_error_response(f"Error executing {name}: {str(e)}")


# dispatch checks arguments against the catalog schema and reports missing ones in its own wording
@app.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict) -> CallToolResult:
    """Handle MCP tool calls by delegating to the handler registry."""
    return await dispatch(name, arguments)


async def main():
    """Run the MCP server."""
    logger.info(f"Azure DevOps MCP Server starting for {AZURE_DEVOPS_ORG_URL}")
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())


def run():
    """Console entry point."""
    validate_config()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Azure DevOps MCP Server stopped")


if __name__ == "__main__":
    run()
