"""Tools package exposing the prompt engineer over MCP."""

from .base_tools import BaseTool, ToolRegistry
from .prompt_tools import (
    AnswerQuestionsTool,
    AskClarificationTool,
    AutoOptimizeTool,
    EngineerPromptTool,
    build_tool_registry,
)

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "AnswerQuestionsTool",
    "AskClarificationTool",
    "AutoOptimizeTool",
    "EngineerPromptTool",
    "build_tool_registry",
]
