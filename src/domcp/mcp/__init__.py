"""
DOMCP MCP Server

Model Context Protocol server that exposes a project's domain model to
coding assistants as tools, resources, and prompts.
"""

from .server import run_server

__all__ = ["run_server"]
