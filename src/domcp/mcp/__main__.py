"""
MCP server entry point for DOMCP.

Run with: python -m domcp.mcp [WORKSPACE]
"""

import asyncio
import logging
import sys
from pathlib import Path

from domcp.core.config import load_settings
from domcp.core.errors import DomcpError
from domcp.core.ir import DomainModel
from domcp.core.store import ModelStore, canonicalize_workspace
from domcp.mcp.server import configure_logging, run_server

logger = logging.getLogger("domcp.mcp")


async def main() -> None:
    """Run the DOMCP MCP server for a workspace (default: cwd)."""
    settings = load_settings()
    configure_logging(settings.log_level)

    workspace = canonicalize_workspace(sys.argv[1] if len(sys.argv) > 1 else Path.cwd())
    logger.info(f"Starting DOMCP MCP server in {workspace}")

    try:
        store = ModelStore(settings.db_path)
        model = store.load(workspace) or DomainModel.empty(workspace)
        await run_server(model, workspace, store)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except DomcpError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
