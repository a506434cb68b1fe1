"""Structured logging configuration for Peng.

Logs go to stderr only: when Peng runs as an MCP server, stdout carries the
stdio protocol and any stray line corrupts the stream. Level and format come
from AppSettings (PENG_LOG_LEVEL, PENG_LOG_FORMAT) or the CLI flags.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

JSON_FIELDS = ("asctime", "levelname", "name", "message", "funcName", "lineno")
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# The SDK logs through these; they get our handler instead of their own
SDK_LOGGERS = ("mcp", "mcp.server", "mcp.server.lowlevel.server")


def build_formatter(fmt: str) -> logging.Formatter:
    if fmt.lower() == "json":
        return JsonFormatter(fmt=" ".join(f"%({field})s" for field in JSON_FIELDS))
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Route every Peng and SDK logger to a single stderr handler.

    Safe to call more than once (each CLI invocation does); previously
    installed handlers are dropped so records are never duplicated.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(fmt))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = [handler]

    for logger in logging.root.manager.loggerDict.values():
        if isinstance(logger, logging.Logger):
            logger.handlers = []
            logger.propagate = True

    for name in SDK_LOGGERS:
        sdk_logger = logging.getLogger(name)
        sdk_logger.handlers = [handler]
        sdk_logger.propagate = False
        sdk_logger.setLevel(log_level)

    return handler
