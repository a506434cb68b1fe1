"""Peng MCP Server.

Exposes the prompt engineering tools over MCP using the official Python SDK
low-level server. Transport is stdio; logging goes to stderr.

Each server instance owns its own SessionStore, so clarification sessions
vanish when the process exits.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from ..errors import PengError
from ..preprocessing import PromptEngineer, SessionStore
from ..settings import AppSettings
from ..tools import ToolRegistry, build_tool_registry

log = logging.getLogger(__name__)


class ToolCallError(Exception):
    """Carries a formatted tool error back through the SDK as an error result."""


class PromptEngineerServer:
    """Binds a PromptEngineer and its tools to an MCP server."""

    def __init__(self, settings: Optional[AppSettings] = None,
                 engineer: Optional[PromptEngineer] = None):
        self.settings = settings or AppSettings()
        self.engineer = engineer or PromptEngineer(SessionStore())
        self.registry: ToolRegistry = build_tool_registry(self.engineer)
        self.server = Server(self.settings.server_name, version=self.settings.server_version)
        self._register_handlers()

    def list_tools(self) -> List[types.Tool]:
        return [types.Tool(**tool.to_mcp_tool()) for tool in self.registry.get_all_tools()]

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> str:
        """Run a tool call; user-facing failures come back as ``Error: ...`` text."""
        try:
            return await self.registry.call(name, arguments)
        except PengError as e:
            log.info(f"Tool {name} failed: {e.message}")
            raise ToolCallError(f"Error: {e.message}") from e

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def _list_tools() -> List[types.Tool]:
            return self.list_tools()

        @self.server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
            text = await self.dispatch(name, arguments)
            return [types.TextContent(type="text", text=text)]

    async def run(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            log.info("Claude Code Prompt Engineer MCP Server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def serve_stdio(settings: Optional[AppSettings] = None) -> None:
    """Run the MCP server over stdio."""
    await PromptEngineerServer(settings).run()


def run_stdio_blocking(settings: Optional[AppSettings] = None) -> None:
    asyncio.run(serve_stdio(settings))
