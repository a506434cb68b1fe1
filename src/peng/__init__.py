"""
Peng - prompt engineering assistant exposed as an MCP server and a CLI.
"""

__version__ = "2.0.0"

__all__ = ["__version__"]
