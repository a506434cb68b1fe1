"""Base classes for tools exposed over MCP."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from ..errors import InvalidArgumentsError, MissingArgumentsError, UnknownToolError


class BaseTool(ABC):
    """Base class for all Peng tools.

    Subclasses declare ``arguments_model`` (a strict pydantic model) and
    implement ``execute`` against the validated arguments.
    """

    arguments_model: Type[BaseModel]

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @abstractmethod
    async def execute(self, arguments: BaseModel) -> str:
        """Execute the tool with validated arguments and return reply text."""
        pass

    @abstractmethod
    def get_parameters_schema(self) -> Dict[str, Any]:
        """Get JSON schema for tool parameters."""
        pass

    def to_mcp_tool(self) -> Dict[str, Any]:
        """Describe the tool in MCP ``tools/list`` form."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.get_parameters_schema(),
        }

    def validate_parameters(self, parameters: Optional[Dict[str, Any]]) -> BaseModel:
        """Validate raw parameters; missing or mistyped required fields are input errors."""
        if parameters is None:
            raise MissingArgumentsError()
        try:
            return self.arguments_model.model_validate(parameters)
        except ValidationError as e:
            raise InvalidArgumentsError(self.name, details=str(e)) from e

    async def __call__(self, parameters: Optional[Dict[str, Any]]) -> str:
        return await self.execute(self.validate_parameters(parameters))


class ToolRegistry:
    """Registry for the tools a server exposes."""

    def __init__(self):
        self._tools: Dict[str, BaseTool] = {}
        self.logger = logging.getLogger(__name__)

    def register(self, tool: BaseTool) -> None:
        """Register a tool."""
        self._tools[tool.name] = tool
        self.logger.debug(f"Registered tool: {tool.name}")

    def get_tool(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name."""
        return self._tools.get(name)

    def get_all_tools(self) -> List[BaseTool]:
        """Get all registered tools."""
        return list(self._tools.values())

    async def call(self, name: str, arguments: Optional[Dict[str, Any]]) -> str:
        """Dispatch a tool call by name."""
        if arguments is None:
            raise MissingArgumentsError()
        tool = self.get_tool(name)
        if tool is None:
            raise UnknownToolError(name)
        self.logger.debug(f"Calling tool: {name}")
        return await tool(arguments)
