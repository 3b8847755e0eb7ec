"""
DOMCP MCP Server implementation.

Implements the Model Context Protocol using the official MCP SDK, exposing
the domain model of one workspace through read tools, write tools,
resources and a guidelines prompt. Requests are served one at a time over
stdio against a single live model.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import GetPromptResult, Prompt, Resource, TextContent, Tool
from pydantic import AnyUrl

from domcp.core import ir
from domcp.core.store import ModelRepository
from domcp.mcp.prompts import create_prompts
from domcp.mcp.prompts import get_prompt as render_prompt
from domcp.mcp.resources import create_resources
from domcp.mcp.resources import read_resource as render_resource

from .handlers import EDIT_HANDLERS, READ_HANDLERS, STORE_HANDLERS
from .state import get_model, get_store, get_workspace, init_state
from .tools import get_all_tools

logger = logging.getLogger("domcp.mcp")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr only (stdout is reserved for JSON-RPC protocol)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stderr)


# Create the MCP server instance
server = Server("domcp")


# ============================================================================
# Tool Handler
# ============================================================================


def dispatch_tool(name: str, arguments: dict[str, Any] | None) -> str:
    """Route a tool call to its handler and return the JSON result text."""
    args = arguments or {}
    model = get_model()

    if name in READ_HANDLERS:
        return READ_HANDLERS[name](model, args)
    elif name in EDIT_HANDLERS:
        return EDIT_HANDLERS[name](model, args)
    elif name in STORE_HANDLERS:
        return STORE_HANDLERS[name](model, get_workspace(), get_store())

    return json.dumps({"error": f"Unknown tool: {name}"})


@server.list_tools()  # type: ignore[no-untyped-call]
async def list_tools_handler() -> list[Tool]:
    """List available DOMCP tools."""
    return get_all_tools()


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a DOMCP tool."""
    logger.debug("Tool call: %s", name)
    return [TextContent(type="text", text=dispatch_tool(name, arguments))]


# ============================================================================
# Resource Handlers
# ============================================================================


@server.list_resources()  # type: ignore[no-untyped-call]
async def list_resources() -> list[Resource]:
    """List available DOMCP resources."""
    return [
        Resource(
            uri=AnyUrl(r["uri"]),
            name=r["name"],
            description=r["description"],
            mimeType=r["mimeType"],
        )
        for r in create_resources(get_model())
    ]


@server.read_resource()  # type: ignore[no-untyped-call]
async def read_resource(uri: AnyUrl) -> str:
    """Read a DOMCP resource by URI."""
    return render_resource(get_model(), str(uri))


# ============================================================================
# Prompt Handlers
# ============================================================================


@server.list_prompts()  # type: ignore[no-untyped-call]
async def list_prompts() -> list[Prompt]:
    """List available DOMCP prompts."""
    return create_prompts()


@server.get_prompt()  # type: ignore[no-untyped-call]
async def get_prompt(name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
    """Get a DOMCP prompt by name."""
    result = render_prompt(get_model(), name)
    if result is None:
        raise ValueError(f"Unknown prompt: {name}")
    return result


# ============================================================================
# Server Entry Point
# ============================================================================


async def run_server(model: ir.DomainModel, workspace: str, store: ModelRepository) -> None:
    """Serve ``model`` for ``workspace`` over stdio until the client disconnects."""
    init_state(model, workspace, store)
    logger.info(
        "Loaded model '%s': %d bounded contexts, %d entities",
        model.name,
        len(model.bounded_contexts),
        model.entity_count(),
    )

    logger.info("Starting DOMCP MCP server...")
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("stdio transport established, running server...")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    except Exception as e:
        logger.exception(f"Server error: {e}")
        raise


__all__ = ["server", "configure_logging", "dispatch_tool", "run_server"]
