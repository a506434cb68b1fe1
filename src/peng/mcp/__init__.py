"""MCP transport for Peng."""

from .server import PromptEngineerServer, run_stdio_blocking, serve_stdio

__all__ = ["PromptEngineerServer", "run_stdio_blocking", "serve_stdio"]
